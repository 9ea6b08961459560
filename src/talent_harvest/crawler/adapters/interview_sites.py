"""Adapters for interview-experience sites."""
from ...models.records import RecordKind
from ..config import AntiBotPolicy, RateLimitWindow, SiteAdapterConfig
from .base import InterviewSiteAdapter


NOWCODER = SiteAdapterConfig(
    site_id="nowcoder",
    name="牛客网",
    kind=RecordKind.INTERVIEW,
    base_url="https://www.nowcoder.com",
    search_url="https://www.nowcoder.com/discuss/tag/639?keyword={keyword}",
    search_suffix="面试",
    item_selectors=(".discuss-list .discuss-item", ".discuss-item", ".feed-item"),
    field_selectors={
        "title": ".discuss-title, .feed-title, h3",
        "content": ".discuss-brief, .feed-content, .content",
        "tags": ".tag",
        "company": ".company-tag",
    },
    company_pattern=r"(阿里|腾讯|字节|百度|美团|京东|网易|华为|小米|滴滴)\S{0,4}(?:面经|一面|二面|三面)",
    headers={"Referer": "https://www.nowcoder.com/"},
    rate_limit=RateLimitWindow(requests=10, window_ms=60000),
    anti_bot=AntiBotPolicy(min_delay_ms=1000, max_delay_ms=3000),
    max_items=10,
)

CSDN = SiteAdapterConfig(
    site_id="csdn",
    name="CSDN",
    kind=RecordKind.INTERVIEW,
    base_url="https://blog.csdn.net",
    search_url="https://so.csdn.net/so/search?q={keyword}&t=blog",
    search_suffix="面试题",
    item_selectors=(".search-list .search-list-item", ".search-list-item", ".list-item"),
    field_selectors={
        "title": ".search-title, .title, h3",
        "content": ".search-des, .desc",
        "tags": ".tag",
    },
    rate_limit=RateLimitWindow(requests=15, window_ms=60000),
    anti_bot=AntiBotPolicy(min_delay_ms=1000, max_delay_ms=3000),
    max_items=8,
)

JUEJIN = SiteAdapterConfig(
    site_id="juejin",
    name="掘金",
    kind=RecordKind.INTERVIEW,
    base_url="https://juejin.cn",
    search_url="https://juejin.cn/search?query={keyword}",
    search_suffix="面试",
    item_selectors=(".search-result-list .search-result-item", ".search-result-item", ".entry"),
    field_selectors={
        "title": ".title, .entry-title",
        "content": ".abstract, .content",
        "tags": ".tag",
    },
    rate_limit=RateLimitWindow(requests=15, window_ms=60000),
    anti_bot=AntiBotPolicy(min_delay_ms=1000, max_delay_ms=3000),
    max_items=8,
)


class NowcoderAdapter(InterviewSiteAdapter):
    """牛客网 discussion board."""

    def __init__(self, config: SiteAdapterConfig = NOWCODER):
        super().__init__(config)


class CsdnAdapter(InterviewSiteAdapter):
    """CSDN blog search."""

    def __init__(self, config: SiteAdapterConfig = CSDN):
        super().__init__(config)


class JuejinAdapter(InterviewSiteAdapter):
    """掘金 article search."""

    def __init__(self, config: SiteAdapterConfig = JUEJIN):
        super().__init__(config)
