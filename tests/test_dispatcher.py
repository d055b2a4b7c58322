import pymupdf
import pytest

from conftest import make_docx, make_pdf
from docextract.errors import EngineNotReadyError, ExtractionEngineError, UnsupportedTypeError
from docextract.models.extract import ResolvedSource
from docextract.services.dispatcher import ExtractionDispatcher
from docextract.services.pdf_engine import PdfEngine


async def _ready_pymupdf():
    return pymupdf


async def _broken_loader():
    raise RuntimeError("cannot load")


def _source(raw: bytes, extension: str, filename: str = "file") -> ResolvedSource:
    return ResolvedSource(
        raw_bytes=raw,
        filename=filename,
        extension=extension,
        content_type="application/octet-stream",
        final_url=f"https://files.test/{filename}",
    )


@pytest.fixture
def dispatcher(settings):
    return ExtractionDispatcher(PdfEngine(loader=_ready_pymupdf), settings)


@pytest.mark.asyncio
async def test_pdf_pages_in_order_one_line_each(dispatcher, three_page_pdf):
    text = await dispatcher.extract(_source(three_page_pdf, "pdf", "three.pdf"))

    assert text == "First page text\nSecond page text\nThird page text\n"
    assert text.split("\n")[:-1] == ["First page text", "Second page text", "Third page text"]


@pytest.mark.asyncio
async def test_pdf_empty_page_still_yields_a_line(dispatcher):
    text = await dispatcher.extract(_source(make_pdf(["Alpha", "", "Gamma"]), "pdf"))

    assert text == "Alpha\n\nGamma\n"


@pytest.mark.asyncio
async def test_pdf_text_runs_joined_by_single_space_in_order(dispatcher):
    doc = pymupdf.open()
    page = doc.new_page()
    page.insert_text((72, 72), "Quarterly report")
    page.insert_text((72, 144), "Revenue grew")
    raw = doc.tobytes()
    doc.close()

    text = await dispatcher.extract(_source(raw, "pdf"))

    assert text == "Quarterly report Revenue grew\n"


@pytest.mark.asyncio
async def test_docx_paragraphs_and_tables(dispatcher):
    raw = make_docx(["Intro paragraph"], table=[["Name", "Role"], ["Ada", "Engineer"]])

    text = await dispatcher.extract(_source(raw, "docx", "team.docx"))

    assert text.startswith("Intro paragraph\n\n")
    for cell in ("Name", "Role", "Ada", "Engineer"):
        assert f"{cell}\n\n" in text
    assert text.index("Name") < text.index("Ada")


@pytest.mark.asyncio
async def test_docx_large_table_keeps_every_cell_in_row_order(dispatcher):
    rows = [[f"r{r}c{c}" for c in range(4)] for r in range(8)]
    raw = make_docx(["Intro"], table=rows)

    text = await dispatcher.extract(_source(raw, "docx", "grid.docx"))

    cells = [value for row in rows for value in row]
    missing = [value for value in cells if f"{value}\n\n" not in text]
    assert missing == []
    positions = [text.index(value) for value in cells]
    assert positions == sorted(positions)


@pytest.mark.asyncio
async def test_docx_text_is_returned_unmodified(dispatcher, sample_docx):
    text = await dispatcher.extract(_source(sample_docx, "docx"))

    assert text == "Hello world\n\nSecond paragraph\n\n"


@pytest.mark.asyncio
@pytest.mark.parametrize("extension", ["", "txt", "doc"])
async def test_unsupported_extension_is_rejected_with_context(dispatcher, extension):
    source = _source(b"data", extension, "notes")

    with pytest.raises(UnsupportedTypeError) as info:
        await dispatcher.extract(source)

    body = info.value.body()
    assert body["filename"] == "notes"
    assert body["detectedExtension"] == extension
    assert body["contentType"] == "application/octet-stream"
    assert body["finalUrl"] == "https://files.test/notes"


@pytest.mark.asyncio
async def test_malformed_pdf_is_an_engine_error(dispatcher):
    with pytest.raises(ExtractionEngineError, match="Could not read PDF"):
        await dispatcher.extract(_source(b"this is not a pdf", "pdf"))


@pytest.mark.asyncio
async def test_corrupt_docx_is_an_engine_error(dispatcher):
    with pytest.raises(ExtractionEngineError, match="Could not read DOCX"):
        await dispatcher.extract(_source(b"PK\x03\x04 truncated", "docx"))


@pytest.mark.asyncio
async def test_pdf_engine_unavailable(settings, three_page_pdf):
    dispatcher = ExtractionDispatcher(PdfEngine(loader=_broken_loader), settings)

    with pytest.raises(EngineNotReadyError):
        await dispatcher.extract(_source(three_page_pdf, "pdf"))


@pytest.mark.asyncio
async def test_docx_does_not_need_pdf_engine(settings, sample_docx):
    engine = PdfEngine(loader=_broken_loader)
    dispatcher = ExtractionDispatcher(engine, settings)

    assert await dispatcher.extract(_source(sample_docx, "docx"))
    assert engine.error is None
