"""Tests for site adapters and the registry."""

import pytest

from src.talent_harvest.crawler.adapters.base import InterviewSiteAdapter
from src.talent_harvest.crawler.adapters.interview_sites import NowcoderAdapter
from src.talent_harvest.crawler.adapters.job_boards import ZhipinAdapter
from src.talent_harvest.crawler.adapters.registry import SiteAdapterRegistry, default_registry
from src.talent_harvest.crawler.config import SiteAdapterConfig
from src.talent_harvest.crawler.errors import CrawlerError, ErrorKind
from src.talent_harvest.models.crawl_result import PageContent
from src.talent_harvest.models.records import RecordKind

from tests.fakes import SITE_A_HTML, make_site_config


NOWCODER_HTML = """
<div class="discuss-list">
    <div class="discuss-item">
        <a href="/discuss/1"><h3>字节跳动一面面经</h3></a>
        <div class="feed-content">1. Redis为什么这么快？</div>
        <span class="tag">Redis</span><span class="tag">后端</span>
    </div>
    <div class="discuss-item">
        <div class="discuss-title">腾讯二面</div>
    </div>
    <div class="discuss-item"></div>
</div>
"""

ZHIPIN_HTML = """
<ul>
    <li class="job-card-wrapper">
        <a href="/job_detail/abc.html"><span class="job-name">Go 后端开发</span></a>
        <span class="salary">20-35K</span>
        <span class="job-area">北京·海淀区</span>
        <h3 class="company-name">某某科技</h3>
    </li>
</ul>
"""


def test_default_registry_lists_every_builtin_site():
    registry = default_registry()

    assert registry.site_ids(RecordKind.INTERVIEW) == ["nowcoder", "csdn", "juejin"]
    assert registry.site_ids(RecordKind.JOB, searchable_only=True) == [
        "zhipin", "liepin", "lagou", "51job"
    ]
    assert "generic" in registry
    assert len(registry) == 8


def test_registry_rejects_duplicates():
    registry = SiteAdapterRegistry([NowcoderAdapter()])

    with pytest.raises(ValueError):
        registry.register(NowcoderAdapter())


def test_adapters_for_keeps_request_order_and_rejects_bad_ids():
    registry = default_registry()

    adapters, rejected = registry.adapters_for(
        ["juejin", "nowcoder", "juejin", "zhipin", "geocities"], RecordKind.INTERVIEW
    )

    assert [a.site_id for a in adapters] == ["juejin", "nowcoder"]
    assert rejected == ["zhipin", "geocities"]


def test_generic_adapter_is_not_searchable():
    registry = default_registry()

    adapters, rejected = registry.adapters_for(["generic"], RecordKind.JOB)

    assert adapters == []
    assert rejected == ["generic"]
    assert registry.job_adapter("nowcoder").site_id == "generic"
    assert registry.job_adapter("zhipin").site_id == "zhipin"


def test_search_url_appends_suffix_and_quotes():
    assert NowcoderAdapter().search_url("redis") == (
        "https://www.nowcoder.com/discuss/tag/639?keyword=redis%20%E9%9D%A2%E8%AF%95"
    )


def test_comma_separated_selectors_are_split():
    config = make_site_config("sitea", field_selectors={"title": ".a, .b ,.c"})

    assert config.selectors_for("title") == (".a", ".b", ".c")
    assert config.selectors_for("missing") == ()


def test_site_id_must_be_lowercase_slug():
    with pytest.raises(ValueError):
        make_site_config("Site A")


def test_interview_adapter_extracts_candidates():
    adapter = NowcoderAdapter()
    page = PageContent(url="https://www.nowcoder.com/search", html=NOWCODER_HTML)

    candidates = adapter.extract_candidates(page)

    assert len(candidates) == 2
    first = candidates[0]
    assert first.field("title") == "字节跳动一面面经"
    assert first.field("content") == "1. Redis为什么这么快？"
    assert first.field("tags") == "Redis,后端"
    assert first.source_url == "https://www.nowcoder.com/discuss/1"
    assert first.source_site == "nowcoder"
    assert candidates[1].field("title") == "腾讯二面"
    assert candidates[1].source_url == "https://www.nowcoder.com/search"


def test_fallback_item_selector_is_used():
    html = "<div class='feed-item'><div class='feed-title'>Redis 持久化</div></div>"
    page = PageContent(url="https://www.nowcoder.com/search", html=html)

    candidates = NowcoderAdapter().extract_candidates(page)

    assert [c.field("title") for c in candidates] == ["Redis 持久化"]


def test_no_matching_items_is_empty_not_error():
    page = PageContent(url="https://sitea.test", html="<p>nothing here</p>")
    adapter = InterviewSiteAdapter(make_site_config("sitea"))

    assert adapter.extract_candidates(page) == []


def test_broken_field_selector_is_parse_error():
    config = make_site_config("sitea", field_selectors={"title": ("a[",)})
    adapter = InterviewSiteAdapter(config)
    page = PageContent(url="https://sitea.test/search", html=SITE_A_HTML)

    with pytest.raises(CrawlerError) as exc_info:
        adapter.extract_candidates(page)

    assert exc_info.value.kind == ErrorKind.PARSE
    assert exc_info.value.field == "title"
    assert exc_info.value.platform == "sitea"


def test_job_board_search_cards():
    page = PageContent(url="https://www.zhipin.com/web/geek/job?query=go", html=ZHIPIN_HTML)

    candidates = ZhipinAdapter().extract_candidates(page)

    assert len(candidates) == 1
    fields = candidates[0].fields
    assert fields["title"] == "Go 后端开发"
    assert fields["salary"] == "20-35K"
    assert fields["location"] == "北京·海淀区"
    assert fields["company"] == "某某科技"
    assert candidates[0].source_url == "https://www.zhipin.com/job_detail/abc.html"


def test_detail_page_reads_whole_document():
    html = "<html><head><title>Data Analyst | Acme</title></head><body><p>SQL daily</p></body></html>"
    page = PageContent(url="https://www.zhipin.com/job_detail/x.html", html=html)
    adapter = ZhipinAdapter().for_detail_page()

    candidates = adapter.extract_candidates(page)

    assert adapter.site_id == "zhipin"
    assert adapter.config.item_selectors == ()
    assert candidates[0].field("title") == "Data Analyst | Acme"
    assert candidates[0].source_url == page.url


def test_config_is_frozen():
    config = make_site_config("sitea")

    with pytest.raises(Exception):
        config.max_items = 99
    assert isinstance(config, SiteAdapterConfig)
