"""Fixture pages and a fake browser session for crawler tests."""

import asyncio
from typing import Dict, List, Optional, Union

from src.talent_harvest.crawler.config import AntiBotPolicy, SiteAdapterConfig
from src.talent_harvest.crawler.errors import CrawlerError
from src.talent_harvest.models.crawl_result import HealthStatus, PageContent
from src.talent_harvest.models.records import RecordKind


SITE_A_HTML = """
<!DOCTYPE html>
<html>
<head><title>Site A - backend interviews</title></head>
<body>
    <div class="question-item">
        <a class="title" href="/q/1">Explain how Redis eviction works?</a>
        <p class="content">The interviewer then moved on to maxmemory policies.</p>
        <span class="tag">redis</span>
    </div>
</body>
</html>
"""

SITE_B_HTML = """
<!DOCTYPE html>
<html>
<head><title>Site B - culture interviews</title></head>
<body>
    <div class="question-item">
        <a class="title" href="/p/9">Describe your favourite team ritual?</a>
        <p class="content">Mostly a chat about onboarding and lunch plans.</p>
    </div>
</body>
</html>
"""

MANY_QUESTIONS_HTML = """
<html><body>
    <div class="question-item"><a class="title" href="/q/1">How does Redis persistence work?</a></div>
    <div class="question-item"><a class="title" href="/q/2">What is a Redis sorted set used for?</a></div>
    <div class="question-item"><a class="title" href="/q/3">Why would Redis cluster reject a write?</a></div>
</body></html>
"""

JOB_DETAIL_HTML = """
<html>
<head><title>Senior Backend Engineer - Acme</title></head>
<body>
    <h1>Senior Backend Engineer</h1>
    <div class="company-name">Acme Cloud</div>
    <span class="salary">25-40K·14薪</span>
    <span class="location">Shanghai</span>
    <span class="experience">3-5 years</span>
    <span class="education">Bachelor</span>
    <div class="description">Build Java and Redis services for our payment platform.</div>
</body>
</html>
"""


def make_site_config(site_id: str, **overrides) -> SiteAdapterConfig:
    """Searchable interview site with no pacing."""
    values = dict(
        site_id=site_id,
        name=site_id.upper(),
        kind=RecordKind.INTERVIEW,
        base_url=f"https://{site_id}.test",
        search_url=f"https://{site_id}.test/search?q={{keyword}}",
        item_selectors=(".question-item",),
        field_selectors={
            "title": ".title",
            "content": ".content",
            "tags": ".tag",
        },
        anti_bot=AntiBotPolicy(min_delay_ms=0, max_delay_ms=0),
    )
    values.update(overrides)
    return SiteAdapterConfig(**values)


class FakeSession:
    """Stands in for BrowserSessionManager; serves fixture pages per site."""

    def __init__(
        self,
        pages: Optional[Dict[str, Union[str, CrawlerError]]] = None,
        ready_error: Optional[CrawlerError] = None,
        delays: Optional[Dict[str, float]] = None,
    ):
        self.pages = pages or {}
        self.ready_error = ready_error
        self.delays = delays or {}
        self.navigations: List[str] = []
        self.calls: List[Dict] = []
        self.ready_calls = 0

    async def ensure_ready(self) -> None:
        self.ready_calls += 1
        if self.ready_error is not None:
            raise self.ready_error

    async def navigate(self, url, timeout_ms=None, delay_range_ms=None, headers=None,
                       platform=None, user_agents=None):
        self.navigations.append(url)
        self.calls.append(dict(
            url=url,
            timeout_ms=timeout_ms,
            delay_range_ms=delay_range_ms,
            headers=headers,
            platform=platform,
            user_agents=user_agents,
        ))
        if platform in self.delays:
            await asyncio.sleep(self.delays[platform])
        page = self.pages.get(platform)
        if isinstance(page, CrawlerError):
            raise page
        if page is None:
            raise CrawlerError.network(url, "no fixture for site", platform=platform)
        return PageContent(url=url, html=page, status_code=200)

    def health_check(self):
        return HealthStatus(status="healthy", browser="running")

    async def cleanup(self) -> None:
        pass
