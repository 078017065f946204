"""Integration tests for NewsListBlock."""

import httpx
import pytest
from lxml import html

from conftest import BASE_URL, SiteStub
from news_digest.block import BlockNotDecoratedError, NewsListBlock, UnknownArticleError
from news_digest.filters import UnknownFacetValueError
from news_digest.views.templating import is_hidden
from schemas.content import PresentationMode


def new_root():
    return html.fragment_fromstring('<div class="news-list-block"></div>')


def make_block(site: SiteStub, **config) -> NewsListBlock:
    return NewsListBlock(
        {"base_url": BASE_URL, "retry_delay": 0, **config},
        transport=site.transport,
    )


def child_classes(root):
    return [child.get("class") for child in root]


def selected_values(root, facet):
    dropdown = root.xpath(f'.//div[@data-facet="{facet}"]')[0]
    return [tag.get("data-value") for tag in dropdown.find_class("selected-tag")]


def paths(elements):
    return [element.get("data-path") for element in elements]


class TestDecorate:
    """Tests for building the news list."""

    @pytest.mark.asyncio
    async def test_builds_structure(self, site):
        """The block holds filters, toggle and the three views."""
        root = new_root()

        async with make_block(site) as block:
            index = await block.decorate(root)

        assert len(index.articles) == 4
        assert "news-list" in root.classes
        assert child_classes(root) == [
            "filter-section",
            "layout-toggle",
            "grid-panel",
            "list-view hidden",
            "newsletter-view hidden",
        ]
        assert block.mode is PresentationMode.GRID
        assert len(block.grid.cards) == 4

    @pytest.mark.asyncio
    async def test_filter_controls_list_vocabulary(self, site):
        """Dropdowns offer the loaded vocabulary."""
        root = new_root()

        async with make_block(site) as block:
            await block.decorate(root)

        dates = root.xpath('.//div[@data-facet="dates"]//label[@data-value]')
        assert [d.get("data-value") for d in dates] == [
            "*",
            "March 2025",
            "January 2025",
            "December 2024",
        ]
        assert root.xpath('.//div[@data-facet="tags"]')
        assert "disabled" in root.find_class("clear-filters-btn")[0].attrib

    @pytest.mark.asyncio
    async def test_initial_requests(self, site):
        """The index is fetched once; only undescribed cards fetch bodies."""
        async with make_block(site) as block:
            await block.decorate(new_root())

        assert site.count("/news/query-index.json") == 1
        assert site.count("/news/quarterly-review.plain.html") == 1
        assert site.count("/news/launch-day.plain.html") == 0

    @pytest.mark.asyncio
    async def test_index_failure_leaves_working_empty_list(self, sample_records):
        """A failed index load shows a notice and empty views."""
        site = SiteStub(sample_records, index_status=500)
        root = new_root()

        async with make_block(site) as block:
            index = await block.decorate(root)
            await block.select_view("list")

        assert index.failed
        status = root.find_class("news-status")[0]
        assert "Unable to load news articles." in status.text_content()
        assert block.store.options("teams") == []
        assert not root.xpath('.//div[@data-facet="tags"]')
        assert block.grid.cards == []
        assert root.find_class("list-view")[0].find_class("no-results")

    @pytest.mark.asyncio
    async def test_blocks_do_not_share_state(self, site):
        """Two blocks keep their own index, cache and filters."""
        async with make_block(site) as first, make_block(site) as second:
            await first.decorate(new_root())
            await second.decorate(new_root())
            await first.toggle_filter("teams", "Sales")

            assert second.state.is_empty
            assert first.cache is not second.cache

        assert site.count("/news/query-index.json") == 2


class TestFiltering:
    """Tests for filter interactions."""

    @pytest.mark.asyncio
    async def test_toggle_filter_updates_grid_and_controls(self, site):
        """Selecting a team narrows the cards and shows the selection."""
        root = new_root()

        async with make_block(site) as block:
            await block.decorate(root)
            await block.toggle_filter("teams", "Platform")

        assert paths(block.grid.cards) == ["/news/launch-day", "/news/undated-note"]
        assert selected_values(root, "teams") == ["Platform"]
        assert "disabled" not in root.find_class("clear-filters-btn")[0].attrib

    @pytest.mark.asyncio
    async def test_date_filter_excludes_undated(self, site):
        """Undated articles drop out once a month is selected."""
        async with make_block(site) as block:
            await block.decorate(new_root())
            await block.toggle_filter("teams", "Platform")
            await block.toggle_filter("dates", "March 2025")

        assert paths(block.grid.cards) == ["/news/launch-day"]

    @pytest.mark.asyncio
    async def test_select_all_and_clear(self, site):
        """"All" resets one facet; clearing resets every facet."""
        async with make_block(site) as block:
            await block.decorate(new_root())
            await block.toggle_filter("teams", "Sales")
            await block.set_uplevel_only(True)

            assert block.grid.cards == []

            await block.select_all("teams")
            assert paths(block.grid.cards) == ["/news/launch-day"]

            await block.clear_filters()
            assert len(block.grid.cards) == 4
            assert block.state.is_empty

    @pytest.mark.asyncio
    async def test_unknown_value(self, site):
        """Values outside the vocabulary are rejected."""
        async with make_block(site) as block:
            await block.decorate(new_root())

            with pytest.raises(UnknownFacetValueError):
                await block.toggle_filter("teams", "Marketing")

    @pytest.mark.asyncio
    async def test_empty_result_in_every_view(self, site):
        """An empty filter result shows a placeholder in each view."""
        root = new_root()

        async with make_block(site) as block:
            await block.decorate(root)
            await block.toggle_filter("teams", "Sales")
            await block.set_uplevel_only(True)

            grid_panel = root.find_class("grid-panel")[0]
            assert grid_panel.find_class("no-results")
            assert is_hidden(block.grid.load_more_button)

            await block.select_view("list")
            assert root.find_class("list-view")[0].find_class("no-results")

            await block.select_view("newsletter")
            newsletter = root.find_class("newsletter-view")[0]
            assert newsletter.find_class("no-results")
            assert len(newsletter.find_class("no-section-results")) == 4


class TestViews:
    """Tests for switching views."""

    @pytest.mark.asyncio
    async def test_switching_views(self, site):
        """Exactly one view is visible and the active button follows it."""
        root = new_root()

        async with make_block(site) as block:
            await block.decorate(root)
            await block.select_view("list")

        assert is_hidden(root.find_class("grid-panel")[0])
        assert not is_hidden(root.find_class("list-view")[0])
        assert is_hidden(root.find_class("newsletter-view")[0])
        assert "active" in root.find_class("list-view-btn")[0].classes
        assert "active" not in root.find_class("grid-view-btn")[0].classes

    @pytest.mark.asyncio
    async def test_bodies_fetched_once_per_mode(self, site):
        """Switching back and forth never refetches a body."""
        async with make_block(site) as block:
            await block.decorate(new_root())
            for view in ("list", "newsletter", "grid", "list", "newsletter"):
                await block.select_view(view)

        assert site.count("/news/launch-day.plain.html") == 2
        assert site.count("/news/quarterly-review.plain.html") == 3

    @pytest.mark.asyncio
    async def test_newsletter_sections(self, site):
        """Articles appear in their newsletter sections."""
        root = new_root()

        async with make_block(site) as block:
            await block.decorate(root)
            await block.select_view(PresentationMode.NEWSLETTER)

        sections = root.find_class("newsletter-section")
        placed = {s.get("data-section"): paths(s.find_class("newsletter-article")) for s in sections}
        assert placed == {
            "introduction": ["/news/quarterly-review"],
            "CustomerFocus": ["/news/customer-visit"],
            "highlight": ["/news/launch-day"],
            "events": ["/news/undated-note"],
        }

    @pytest.mark.asyncio
    async def test_newsletter_latest_month(self, site):
        """With the option on, the newsletter opens on the latest month."""
        async with make_block(site, newsletter_latest_month=True) as block:
            await block.decorate(new_root())
            await block.select_view("newsletter")

        assert block.state.dates == {"March 2025"}


class TestLoadMore:
    """Tests for grid pagination through the block."""

    @pytest.mark.asyncio
    async def test_pages(self):
        """Fourteen articles page as 6, 12, 14."""
        records = [
            {"path": f"/news/item-{i:02d}", "title": f"Item {i}", "description": "x"}
            for i in range(14)
        ]
        site = SiteStub(records)

        async with make_block(site) as block:
            await block.decorate(new_root())

            assert block.grid.visible_count == 6
            assert block.load_more() == 6
            assert block.grid.visible_count == 12
            assert block.load_more() == 2
            assert not block.grid.can_load_more

    @pytest.mark.asyncio
    async def test_custom_page_size(self, site):
        async with make_block(site, page_size=3) as block:
            await block.decorate(new_root())

            assert block.grid.visible_count == 3
            assert block.grid.load_more_button.text == "Load More (1 remaining)"

    def test_requires_decorate(self, site):
        """Interactions before decorate raise."""
        block = make_block(site)

        with pytest.raises(BlockNotDecoratedError):
            block.load_more()
        with pytest.raises(BlockNotDecoratedError):
            block.activate("/news/launch-day")


class TestRefreshAndNavigation:
    """Tests for refresh() and activate()."""

    @pytest.mark.asyncio
    async def test_refresh_retries_failed_bodies(self, sample_records):
        """A failed body is retried only on refresh."""
        site = SiteStub(sample_records, missing={"/news/customer-visit"})
        root = new_root()

        async with make_block(site) as block:
            await block.decorate(root)
            await block.select_view("list")
            await block.select_view("grid")
            await block.select_view("list")

            list_view = root.find_class("list-view")[0]
            assert len(list_view.find_class("content-unavailable")) == 1
            assert site.count("/news/customer-visit.plain.html") == 1

            site.missing.clear()
            await block.refresh()

            assert list_view.find_class("content-unavailable") == []
            assert site.count("/news/customer-visit.plain.html") == 2

    @pytest.mark.asyncio
    async def test_activate_navigates(self, site):
        """Activating an article passes its path to the navigator."""
        visited = []
        block = NewsListBlock(
            {"base_url": BASE_URL},
            transport=site.transport,
            navigate=visited.append,
        )

        async with block:
            await block.decorate(new_root())
            block.activate("/news/launch-day")

            with pytest.raises(UnknownArticleError):
                block.activate("/news/unknown")

        assert visited == ["/news/launch-day"]

    @pytest.mark.asyncio
    async def test_close_releases_clients(self, site):
        block = make_block(site)
        await block.decorate(new_root())

        await block.close()

        assert block.index_client._client is None
        assert block.content_client._client is None

    @pytest.mark.asyncio
    async def test_close_unsubscribes_filter_controls(self, site):
        """A closed block no longer re-renders its filter controls."""
        root = new_root()
        block = make_block(site)
        await block.decorate(root)
        section = root.find_class("filter-section")[0]

        await block.close()
        block.store.toggle_value("teams", "Sales")

        assert block.store._listeners == []
        assert root.find_class("filter-section")[0] is section


class TestRequestErrors:
    """Tests for request errors reaching the block."""

    @pytest.mark.asyncio
    async def test_index_redirect_loop(self):
        """A redirect loop on the index leaves an empty news list."""

        def handler(request):
            raise httpx.TooManyRedirects("loop", request=request)

        root = new_root()
        block = NewsListBlock(
            {"base_url": BASE_URL, "retry_delay": 0},
            transport=httpx.MockTransport(handler),
        )

        async with block:
            index = await block.decorate(root)

        assert index.failed
        assert root.find_class("news-status")
        assert block.grid.cards == []

    @pytest.mark.asyncio
    async def test_undecodable_body(self, sample_records):
        """An undecodable article body shows the fallback in its row only."""
        site = SiteStub(sample_records)

        def handler(request):
            if request.url.path == "/news/launch-day.plain.html":
                raise httpx.DecodingError("bad gzip", request=request)
            return site.handler(request)

        root = new_root()
        block = NewsListBlock(
            {"base_url": BASE_URL, "retry_delay": 0},
            transport=httpx.MockTransport(handler),
        )

        async with block:
            await block.decorate(root)
            await block.select_view("list")

        list_view = root.find_class("list-view")[0]
        assert len(list_view.find_class("article-list-item")) == 4
        unavailable = list_view.find_class("content-unavailable")
        assert len(unavailable) == 1
        row = next(unavailable[0].iterancestors("article"))
        assert row.get("data-path") == "/news/launch-day"
