"""Shared fixtures: sample schemas and a helper that generates and imports a client."""

import importlib
import sys

import pytest

from gql_typegen.core.config import GeneratorConfig
from gql_typegen.core.generator import CodeGenerator
from gql_typegen.core.parser import parse_schema
from gql_typegen.core.resolver import TypeResolver
from gql_typegen.core.scalars import ScalarRegistry


# =============================================================================
# Schemas
# =============================================================================

BLOG_SCHEMA = '''
"""A moment in time, ISO-8601 encoded."""
scalar DateTime

scalar Money

enum Role {
  ADMIN
  "Regular member"
  MEMBER
  GUEST
}

interface Node {
  id: ID!
}

"""A registered user."""
type User implements Node {
  id: ID!
  name: String
  email: String
  role: Role
  "Posts written by this user"
  posts(first: Int = 10, tag: String): [Post!]!
  createdAt: DateTime
  balance: Money
}

type Post implements Node {
  id: ID!
  title: String!
  tags: [String]
  author: User
  comments: [Comment!]
}

type Comment {
  body: String!
  author: User!
  replies: [Comment!]!
}

type ResetPayload {
  ok: Boolean!
}

input CreateUserInput {
  name: String!
  email: String
  role: Role
  address: AddressInput
}

input AddressInput {
  street: String!
  city: String!
  zip: String
}

type Query {
  user(id: ID!): User
  users(role: Role, limit: Int): [User!]!
  node(id: ID!): Node
  serverTime: DateTime!
}

type Mutation {
  createUser(input: CreateUserInput!): User!
  resetAll: ResetPayload
}
'''

CYCLIC_SCHEMA = '''
type A {
  name: String
  b: B
}

type B {
  name: String
  a: A
}

type Query {
  a: A
}
'''


@pytest.fixture(scope="session")
def blog_schema():
    return BLOG_SCHEMA


@pytest.fixture(scope="session")
def cyclic_schema():
    return CYCLIC_SCHEMA


@pytest.fixture
def blog_registry():
    return parse_schema(BLOG_SCHEMA)


@pytest.fixture
def cyclic_registry():
    return parse_schema(CYCLIC_SCHEMA)


@pytest.fixture
def resolver(blog_registry):
    return TypeResolver(blog_registry, ScalarRegistry({"Money": "decimal.Decimal"}), "blog")


# =============================================================================
# Generated clients
# =============================================================================

def _purge_modules(namespace: str):
    root = namespace.split(".")[0]
    for name in list(sys.modules):
        if name == root or name.startswith(root + "."):
            del sys.modules[name]


@pytest.fixture(scope="module")
def generate_client(tmp_path_factory):
    """Generate a schema into a temp directory and import its namespace package.

    Returns a function ``(schema, namespace, **config) -> module``. Each call
    must use a namespace not used elsewhere in the test module.
    """
    output = tmp_path_factory.mktemp("generated")
    namespaces = []

    with pytest.MonkeyPatch.context() as mp:
        mp.syspath_prepend(str(output))

        def _generate(schema: str, namespace: str, **options):
            config = GeneratorConfig(namespace=namespace, output_directory=output, **options)
            CodeGenerator(config).generate(schema)
            namespaces.append(namespace)
            importlib.invalidate_caches()
            return importlib.import_module(namespace)

        yield _generate

    for namespace in namespaces:
        _purge_modules(namespace)
