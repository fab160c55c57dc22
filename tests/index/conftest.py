"""Shared fixtures for index tests."""

from __future__ import annotations

import tempfile
from collections.abc import Generator
from dataclasses import dataclass
from pathlib import Path

import pytest

from codeindexer.index._internal.indexing import SearchIndex
from codeindexer.index.models import (
    ElementKind,
    MemberElement,
    NamespaceElement,
    ParameterInfo,
    SourceLocation,
    TypeElement,
    compute_content_hash,
)


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory(ignore_cleanup_errors=True) as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def search_index(temp_dir: Path) -> Generator[SearchIndex, None, None]:
    """An open SearchIndex with a small writer, closed after the test."""
    index = SearchIndex(
        temp_dir / "tantivy_index",
        writer_heap_size_mb=50,
        writer_num_threads=1,
        refresh_min_interval_sec=0.0,
    )
    index.open()
    yield index
    index.close()


@dataclass
class Scenario:
    """Namespace N holding class C with methods M1 and M2."""

    namespace: NamespaceElement
    cls: TypeElement
    m1: MemberElement
    m2: MemberElement

    @property
    def elements(self) -> list[NamespaceElement | TypeElement | MemberElement]:
        return [self.namespace, self.cls, self.m1, self.m2]


def make_scenario() -> Scenario:
    """Build the N/C/M1/M2 element set."""
    namespace = NamespaceElement(
        name="MyApp",
        full_name="MyApp",
        location=SourceLocation(file_path="src/UserService.cs", start_line=1),
        content_hash=compute_content_hash("namespace MyApp"),
    )
    cls = TypeElement(
        kind=ElementKind.CLASS,
        name="UserService",
        full_name="MyApp.UserService",
        location=SourceLocation(file_path="src/UserService.cs", start_line=3),
        access_modifier="public",
        documentation="Manages user accounts.",
        parent_id=namespace.id,
        content_hash=compute_content_hash("class UserService"),
    )
    m1 = MemberElement(
        kind=ElementKind.METHOD,
        name="GetUser",
        full_name="MyApp.UserService.GetUser",
        location=SourceLocation(file_path="src/UserService.cs", start_line=5),
        access_modifier="public",
        type_name="void",
        parameters=[ParameterInfo(name="id", type_name="int")],
        parent_id=cls.id,
        content_hash=compute_content_hash("void GetUser(int id)"),
    )
    m2 = MemberElement(
        kind=ElementKind.METHOD,
        name="DeleteUser",
        full_name="MyApp.UserService.DeleteUser",
        location=SourceLocation(file_path="src/UserService.cs", start_line=10),
        access_modifier="private",
        modifiers=["async"],
        type_name="string",
        is_async=True,
        parent_id=cls.id,
        content_hash=compute_content_hash("string DeleteUser()"),
    )
    return Scenario(namespace=namespace, cls=cls, m1=m1, m2=m2)


@pytest.fixture
def scenario() -> Scenario:
    return make_scenario()
