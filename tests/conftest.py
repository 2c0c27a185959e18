"""Shared pytest fixtures for yangkit tests."""

from pathlib import Path

import pytest

from yangkit.core.grammar import parse_document
from yangkit.core.ir.names import Namespace, QualifiedName
from yangkit.core.ir.restrictions import Interval, RangeRestriction
from yangkit.core.ir.types import YangType
from yangkit.core.primitives import INT32
from yangkit.core.statements import StatementTree

EXAMPLE_MODULE = """\
module example {
  yang-version 1;
  namespace "urn:example:types";
  prefix ex;
  organization "Example Org";
  description
    "Types used by the
     example module.";

  revision 2024-01-15 {
    description "Initial revision.";
  }

  typedef percent {
    type uint8 {
      range "0..100";
    }
    default 50;
    units "%";
  }

  typedef small-percent {
    type percent {
      range "0..10" {
        error-message "Too large";
      }
    }
    default 5;
  }

  typedef short-name {
    type string {
      length "1..8";
      pattern "[a-z]+";
    }
  }

  typedef price {
    type decimal64 {
      fraction-digits 2;
    }
  }

  container settings {
    leaf level {
      type ex:percent;
    }
  }
}
"""


@pytest.fixture
def example_namespace() -> Namespace:
    return Namespace(module="example", uri="urn:example:types")


@pytest.fixture
def example_module_text() -> str:
    """Source text of a module with a few typedefs."""
    return EXAMPLE_MODULE


@pytest.fixture
def example_module_file(tmp_path: Path) -> Path:
    """The example module written to a temporary file."""
    path = tmp_path / "example.yang"
    path.write_text(EXAMPLE_MODULE, encoding="utf-8")
    return path


@pytest.fixture
def example_tree() -> StatementTree:
    return parse_document(EXAMPLE_MODULE).tree


@pytest.fixture
def bounded_int(example_namespace: Namespace) -> YangType:
    """int32 restricted to [1, 10]."""
    return YangType(
        QualifiedName(namespace=example_namespace, name="bounded"),
        base_type=INT32,
        restrictions=[RangeRestriction(ranges=[Interval[float](low=1, high=10)])],
    )
