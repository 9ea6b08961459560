"""Adapters for job boards."""
from ...models.records import RecordKind
from ..config import AntiBotPolicy, RateLimitWindow, SiteAdapterConfig
from .base import JobBoardAdapter


ZHIPIN = SiteAdapterConfig(
    site_id="zhipin",
    name="BOSS直聘",
    kind=RecordKind.JOB,
    base_url="https://www.zhipin.com",
    search_url="https://www.zhipin.com/web/geek/job?query={keyword}",
    item_selectors=(".job-card-wrapper", ".job-card-box", ".job-primary"),
    field_selectors={
        "title": '.job-title, .job-name, .name, h1',
        "company": '.company-name, .company, [class*="company"]',
        "salary": '.salary, .money, [class*="salary"]',
        "location": '.job-area, .location, [class*="location"]',
        "experience": '.job-experience, .experience, [class*="experience"]',
        "education": '.job-degree, .education, [class*="education"]',
        "description": '.job-detail, .job-description, .detail-content',
        "requirements": '.job-require, .requirements',
    },
    rate_limit=RateLimitWindow(requests=10, window_ms=60000),
    anti_bot=AntiBotPolicy(min_delay_ms=2000, max_delay_ms=5000),
)

LIEPIN = SiteAdapterConfig(
    site_id="liepin",
    name="猎聘",
    kind=RecordKind.JOB,
    base_url="https://www.liepin.com",
    search_url="https://www.liepin.com/zhaopin/?key={keyword}",
    item_selectors=(".job-list-item", ".job-card-pc-container", ".sojob-item-main"),
    field_selectors={
        "title": '.position-title, .job-title, .ellipsis-1, h1',
        "company": '.company-name, .company',
        "salary": '.salary-text, .job-salary, .salary',
        "location": '.work-addr, .job-dq-box, .location',
        "experience": '.work-experience, .experience',
        "education": '.education-text, .education',
        "description": '.job-description, .job-detail',
        "requirements": '.job-require, .requirements',
    },
    rate_limit=RateLimitWindow(requests=20, window_ms=60000),
    anti_bot=AntiBotPolicy(min_delay_ms=1000, max_delay_ms=3000),
)

LAGOU = SiteAdapterConfig(
    site_id="lagou",
    name="拉勾",
    kind=RecordKind.JOB,
    base_url="https://www.lagou.com",
    search_url="https://www.lagou.com/wn/jobs?kd={keyword}",
    item_selectors=(".item__10RTO", ".con_list_item", ".position-list-item"),
    field_selectors={
        "title": '.position-name, .job-name, #openWinPostion',
        "company": '.company-name, .company, .company-name__2-SjF',
        "salary": '.salary-text, .money__3Lkgq, .salary',
        "location": '.work-address, .location',
        "experience": '.work-year, .experience',
        "education": '.education, .xueli',
        "description": '.job-detail, .job_bt',
        "requirements": '.job-require, .requirements',
    },
    rate_limit=RateLimitWindow(requests=15, window_ms=60000),
    anti_bot=AntiBotPolicy(min_delay_ms=1500, max_delay_ms=4000),
)

FIFTYONE_JOB = SiteAdapterConfig(
    site_id="51job",
    name="前程无忧",
    kind=RecordKind.JOB,
    base_url="https://www.51job.com",
    search_url="https://we.51job.com/pc/search?keyword={keyword}",
    item_selectors=(".joblist-item", ".j_joblist .e", ".el"),
    field_selectors={
        "title": '.jname, .job-title, .in-dl-title',
        "company": '.cname, .company-name, .in-dl-company',
        "salary": '.sal, .salary, .in-dl-salary',
        "location": '.area, .location, .in-dl-location',
        "experience": '.experience, .in-dl-experience',
        "education": '.education, .in-dl-education',
        "description": '.job-description, .bmsg',
        "requirements": '.job-require, .requirements',
    },
    rate_limit=RateLimitWindow(requests=30, window_ms=60000),
    anti_bot=AntiBotPolicy(min_delay_ms=1000, max_delay_ms=2000),
)

GENERIC = SiteAdapterConfig(
    site_id="generic",
    name="Generic job page",
    kind=RecordKind.JOB,
    base_url="https://example.com",
    field_selectors={
        "title": 'h1, .job-title, .title, [class*="title"], [id*="title"]',
        "company": '.company-name, .company, [class*="company"], [id*="company"]',
        "salary": '.salary, .price, .money, [class*="salary"], [class*="price"]',
        "location": '.location, .address, .city, [class*="location"], [class*="address"]',
        "experience": '.experience, .exp, [class*="experience"]',
        "education": '.education, .degree, [class*="education"], [class*="degree"]',
        "description": '.description, .job-desc, .detail, .content, [class*="description"]',
        "requirements": '.requirements, .require, [class*="require"]',
    },
    rate_limit=RateLimitWindow(requests=30, window_ms=60000),
    anti_bot=AntiBotPolicy(min_delay_ms=500, max_delay_ms=1500),
    max_items=1,
)


class ZhipinAdapter(JobBoardAdapter):
    """BOSS直聘."""

    def __init__(self, config: SiteAdapterConfig = ZHIPIN):
        super().__init__(config)


class LiepinAdapter(JobBoardAdapter):
    """猎聘."""

    def __init__(self, config: SiteAdapterConfig = LIEPIN):
        super().__init__(config)


class LagouAdapter(JobBoardAdapter):
    """拉勾."""

    def __init__(self, config: SiteAdapterConfig = LAGOU):
        super().__init__(config)


class FiftyOneJobAdapter(JobBoardAdapter):
    """前程无忧 (51job)."""

    def __init__(self, config: SiteAdapterConfig = FIFTYONE_JOB):
        super().__init__(config)


class GenericJobAdapter(JobBoardAdapter):
    """Any job detail page; not searchable."""

    def __init__(self, config: SiteAdapterConfig = GENERIC):
        super().__init__(config)
