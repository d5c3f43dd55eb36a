from teamdocs.core.errors import UpstreamError
from teamdocs.domains.assistant.services import AssistantService
from teamdocs.domains.search.schemas import SearchMode
from teamdocs.domains.search.services import SearchService

from tests.conftest import FakeGenerator


async def seed(repos, author):
    notes = await repos.documents.create(
        {"title": "Release Notes", "content": "What we are shipping", "tags": ["beta"]}, author.id
    )
    menu = await repos.documents.create({"title": "Lunch menu", "content": "Tacos"}, author.id)
    return notes, menu


async def test_text_search_has_no_relevance(repos, alice, settings):
    notes, _ = await seed(repos, alice)
    service = SearchService(repos.documents, AssistantService(FakeGenerator(), settings))

    hits = await service.search("beta", SearchMode.TEXT)

    assert [(hit.item.document.id, hit.relevance) for hit in hits] == [(notes.id, None)]


async def test_semantic_search_ranks_documents(repos, alice, settings):
    notes, menu = await seed(repos, alice)
    # list() отдает последние измененные первыми: menu = 0, notes = 1
    generator = FakeGenerator(['[{"index": 0, "relevance": 40}, {"index": 1, "relevance": 95}]'])
    service = SearchService(repos.documents, AssistantService(generator, settings))

    hits = await service.search("what ships next", SearchMode.SEMANTIC)

    assert [(hit.item.document.id, hit.relevance) for hit in hits] == [(notes.id, 95), (menu.id, 40)]


async def test_semantic_search_falls_back_to_text(repos, alice, settings):
    notes, _ = await seed(repos, alice)
    generator = FakeGenerator(error=UpstreamError("quota exceeded"))
    service = SearchService(repos.documents, AssistantService(generator, settings))

    hits = await service.search("release", SearchMode.SEMANTIC)

    assert [(hit.item.document.id, hit.relevance) for hit in hits] == [(notes.id, None)]


async def test_semantic_search_falls_back_on_unparsable_output(repos, alice, settings):
    notes, _ = await seed(repos, alice)
    generator = FakeGenerator(["Sorry, I cannot rank these."])
    service = SearchService(repos.documents, AssistantService(generator, settings))

    hits = await service.semantic_search("shipping")

    assert [hit.item.document.id for hit in hits] == [notes.id]
