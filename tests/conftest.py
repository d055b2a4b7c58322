"""
Shared fixtures: in-memory PDF/DOCX documents and a fake upstream document host.
"""

import io
from typing import Callable, Union

import docx
import httpx
import pymupdf
import pytest

from docextract.config import Settings

Route = Union[httpx.Response, Callable[[httpx.Request], httpx.Response]]


def make_pdf(pages: list[str]) -> bytes:
    doc = pymupdf.open()
    for text in pages:
        page = doc.new_page()
        if text:
            page.insert_text((72, 72), text)
    data = doc.tobytes()
    doc.close()
    return data


def make_docx(paragraphs: list[str], table: list[list[str]] = None) -> bytes:
    document = docx.Document()
    for text in paragraphs:
        document.add_paragraph(text)
    if table:
        t = document.add_table(rows=len(table), cols=len(table[0]))
        for r, row in enumerate(table):
            for c, value in enumerate(row):
                t.cell(r, c).text = value
    buf = io.BytesIO()
    document.save(buf)
    return buf.getvalue()


class FakeHost:
    """Maps request paths to canned responses for httpx.MockTransport."""

    def __init__(self) -> None:
        self.routes: dict[str, Route] = {}
        self.requests: list[httpx.Request] = []

    def add(self, path: str, response: Route) -> None:
        self.routes[path] = response

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get(request.url.path)
        if route is None:
            return httpx.Response(404, text="Not Found")
        if callable(route):
            return route(request)
        return route

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture
def host() -> FakeHost:
    return FakeHost()


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None)


@pytest.fixture(scope="session")
def three_page_pdf() -> bytes:
    return make_pdf(["First page text", "Second page text", "Third page text"])


@pytest.fixture(scope="session")
def sample_docx() -> bytes:
    return make_docx(["Hello world", "Second paragraph"])
