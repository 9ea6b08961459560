"""
Site adapter base classes.

An adapter owns one ``SiteAdapterConfig`` and knows how to turn a fetched
page into crawl candidates. Selectors are tried in order per field so a
markup change on one site only needs a new fallback selector in its config.
"""
from abc import ABC, abstractmethod
from typing import List, Optional, Tuple
from urllib.parse import urljoin

from bs4 import BeautifulSoup, Tag

from ...core.logging import logger
from ...models.crawl_result import PageContent
from ...models.records import CrawlCandidate, RecordKind
from ..config import SiteAdapterConfig
from ..errors import CrawlerError


class SiteAdapter(ABC):
    """Maps one site's pages to ``CrawlCandidate`` sequences."""

    def __init__(self, config: SiteAdapterConfig):
        self.config = config

    @property
    def site_id(self) -> str:
        return self.config.site_id

    @property
    def name(self) -> str:
        return self.config.name

    @property
    def kind(self) -> RecordKind:
        return self.config.kind

    @property
    def searchable(self) -> bool:
        return self.config.searchable

    def selectors_for(self, field: str) -> Tuple[str, ...]:
        return self.config.selectors_for(field)

    def search_url(self, keyword: str) -> str:
        return self.config.build_search_url(keyword)

    def extract_candidates(self, page: PageContent) -> List[CrawlCandidate]:
        """
        Extract raw candidates from a fetched page.

        Items that fail field extraction are skipped. If every item on the
        page failed, the first parse error is raised.

        Args:
            page: Navigation result

        Returns:
            Candidates in page order, at most ``config.max_items``

        Raises:
            CrawlerError: ``parse`` kind when no item could be extracted
        """
        soup = BeautifulSoup(page.html or "", "html.parser")
        items = self.find_items(soup, page.url)

        candidates: List[CrawlCandidate] = []
        errors: List[CrawlerError] = []
        for item in items[: self.config.max_items]:
            try:
                candidate = self.build_candidate(item, page)
            except CrawlerError as e:
                logger.debug(f"Skipping item on {self.site_id}: {e.message}")
                errors.append(e.with_platform(self.site_id))
                continue

            if candidate is not None:
                candidates.append(candidate)

        if errors and not candidates:
            raise errors[0]

        logger.debug(f"{self.site_id}: {len(candidates)} candidates from {page.url}")
        return candidates

    def find_items(self, soup: BeautifulSoup, url: str) -> List[Tag]:
        """Repeated result items, or the whole page for detail-style adapters."""
        if not self.config.item_selectors:
            return [soup]

        for selector in self.config.item_selectors:
            try:
                found = soup.select(selector)
            except Exception as e:
                raise CrawlerError.parse(url, "items", str(e), platform=self.site_id) from e
            if found:
                return found

        logger.debug(f"{self.site_id}: no item selector matched on {url}")
        return []

    def select_text(self, node: Tag, field: str, url: str) -> str:
        """Text of the first selector for ``field`` that yields any."""
        for selector in self.selectors_for(field):
            try:
                element = node.select_one(selector)
            except Exception as e:
                raise CrawlerError.parse(url, field, str(e), platform=self.site_id) from e
            if element is None:
                continue
            text = element.get_text(" ", strip=True)
            if text:
                return text
        return ""

    def select_all_text(self, node: Tag, field: str, url: str) -> List[str]:
        """All texts matched by the first productive selector for ``field``."""
        for selector in self.selectors_for(field):
            try:
                elements = node.select(selector)
            except Exception as e:
                raise CrawlerError.parse(url, field, str(e), platform=self.site_id) from e
            texts = [el.get_text(" ", strip=True) for el in elements]
            texts = [text for text in texts if text]
            if texts:
                return texts
        return []

    def item_link(self, node: Tag, page_url: str) -> str:
        for selector in self.config.link_selectors:
            link = node if node.name == "a" and node.get("href") else node.select_one(selector)
            if link is not None and link.get("href"):
                return urljoin(page_url, link["href"])
        return page_url

    @abstractmethod
    def build_candidate(self, item: Tag, page: PageContent) -> Optional[CrawlCandidate]:
        """Build a candidate from one item, or None if it holds nothing."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}(site_id={self.site_id!r})"


class InterviewSiteAdapter(SiteAdapter):
    """Search-result pages listing interview write-ups."""

    def build_candidate(self, item: Tag, page: PageContent) -> Optional[CrawlCandidate]:
        title = self.select_text(item, "title", page.url)
        content = self.select_text(item, "content", page.url)
        if not title and not content:
            return None

        fields = {"title": title, "content": content}
        tags = self.select_all_text(item, "tags", page.url)
        if tags:
            fields["tags"] = ",".join(tags)
        company = self.select_text(item, "company", page.url)
        if company:
            fields["company"] = company

        return CrawlCandidate(
            raw_text=" ".join(part for part in (title, content) if part),
            source_url=self.item_link(item, page.url),
            source_site=self.site_id,
            fields=fields,
        )


JOB_FIELDS = (
    "title", "company", "salary", "location",
    "experience", "education", "description", "requirements",
)


class JobBoardAdapter(SiteAdapter):
    """Job boards: search result cards, or a single detail page."""

    def for_detail_page(self) -> "JobBoardAdapter":
        """Same board, but read the whole page as one posting."""
        if not self.config.item_selectors:
            return self
        config = self.config.model_copy(update={"item_selectors": (), "max_items": 1})
        return type(self)(config)

    def build_candidate(self, item: Tag, page: PageContent) -> Optional[CrawlCandidate]:
        fields = {}
        for field in JOB_FIELDS:
            text = self.select_text(item, field, page.url)
            if text:
                fields[field] = text

        if "title" not in fields and isinstance(item, BeautifulSoup) and item.title:
            page_title = item.title.get_text(strip=True)
            if page_title:
                fields["title"] = page_title

        if not fields:
            return None

        is_detail_page = isinstance(item, BeautifulSoup)
        return CrawlCandidate(
            raw_text=" ".join(fields.values()),
            source_url=page.url if is_detail_page else self.item_link(item, page.url),
            source_site=self.site_id,
            fields=fields,
        )
