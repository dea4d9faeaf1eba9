import pytest

from conftest import VALID_CONTENT
from resumegen.errors import NotFoundError
from resumegen.models.generation_models import ResumeContent, ResumeDocument
from resumegen.services.document_assembler import assemble
from resumegen.services.pdf_renderer import extract_year, to_markup
from resumegen.services.pdf_templates import TEMPLATES, TemplateRegistry, TemplateStyle


@pytest.fixture
def document(jane):
    return assemble(jane, ResumeContent(**VALID_CONTENT), show_private_contact=True)


@pytest.mark.parametrize("template_id", sorted(TEMPLATES))
def test_every_template_renders(template_id, document):
    pdf = TemplateRegistry().render(template_id, document)
    assert pdf.startswith(b"%PDF")


def test_minimal_document_renders():
    pdf = TemplateRegistry().render("Resume", ResumeDocument(name="A", title="B"))
    assert pdf.startswith(b"%PDF")


def test_skills_as_list_render(document):
    pdf = TemplateRegistry().render("Resume", document.model_copy(update={"skills": ["Python", "Go"]}))
    assert pdf.startswith(b"%PDF")


def test_unknown_template():
    with pytest.raises(NotFoundError):
        TemplateRegistry().get("Missing")


def test_section_titles_fall_back():
    assert TemplateStyle(id="plain").section_title("experience") == "Experience"
    assert TEMPLATES["Resume-Executive-Navy"].section_title("experience") == "Professional Experience"


def test_to_markup():
    assert to_markup("Built <strong>Kafka</strong> & **Go** <tools>") == (
        "Built <b>Kafka</b> &amp; <b>Go</b> &lt;tools&gt;"
    )
    assert to_markup(None) == ""


def test_extract_year():
    assert extract_year("May 2019") == "2019"
    assert extract_year(2015) == "2015"
    assert extract_year("n/a") == "n/a"
    assert extract_year(None) == ""
