"""Tests for the extraction pipeline."""

from datetime import datetime, timezone

import pytest

from src.talent_harvest.crawler.errors import CrawlerError, ErrorKind
from src.talent_harvest.models.records import (
    Category,
    CrawlCandidate,
    Difficulty,
    JobType,
    QuestionType,
    RecordKind,
)
from src.talent_harvest.models.requests import CrawlRequest
from src.talent_harvest.pipeline.extraction import ExtractionPipeline, contains_term


@pytest.fixture
def pipeline() -> ExtractionPipeline:
    return ExtractionPipeline()


def candidate(title: str, content: str = "", site: str = "sitea", **fields) -> CrawlCandidate:
    values = {"title": title, "content": content}
    values.update(fields)
    return CrawlCandidate(
        raw_text=f"{title} {content}".strip(),
        source_url=f"https://{site}.test/q/1",
        source_site=site,
        extracted_at=datetime(2024, 5, 1, tzinfo=timezone.utc),
        fields=values,
    )


def test_clean_text_strips_markup_and_scripts(pipeline):
    raw = (
        '<div onclick="steal()">What is  <b>MVCC</b>?<script>alert(1)</script></div>'
        "\u200b javascript:void(0)"
    )

    assert pipeline.clean_text(raw) == "What is MVCC ? void(0)"
    assert pipeline.clean_text(None) == ""
    assert pipeline.clean_text("  a\t\nb  ") == "a b"


def test_clean_text_keeps_generics_and_comparisons(pipeline):
    generics = "Why is List<String> not a subtype of List<Object>?"
    comparison = "When is a<b faster than a>b in C++?"

    assert pipeline.clean_text(generics) == generics
    assert pipeline.clean_text(comparison) == comparison
    assert pipeline.build_id(pipeline.clean_text(generics), "sitea") != pipeline.build_id(
        pipeline.clean_text("Why is List<Integer> not a subtype of List<Object>?"), "sitea"
    )


def test_clean_text_drops_embedded_frames(pipeline):
    assert pipeline.clean_text('Intro <iframe src="https://evil.test"></iframe> text') == "Intro text"
    assert pipeline.clean_text("Intro <object data=x.swf> text") == "Intro text"


def test_contains_term_respects_word_boundaries():
    assert contains_term("Java and Spring", "java")
    assert not contains_term("JavaScript closures", "java")
    assert contains_term("讲讲Redis缓存", "缓存")


def test_relevance_uses_request_keywords_first(pipeline):
    request = CrawlRequest(category="backend", keywords=["kafka"])

    assert pipeline.is_relevant("How does Kafka keep ordering?", request)
    assert not pipeline.is_relevant("How does Redis keep ordering?", request)


def test_relevance_falls_back_to_category_keywords(pipeline):
    request = CrawlRequest(category="后端开发")

    assert request.category == Category.BACKEND
    assert pipeline.is_relevant("Explain MySQL index pushdown", request)
    assert not pipeline.is_relevant("Favourite team ritual", request)
    assert not pipeline.is_relevant("", request)


def test_difficulty_classification(pipeline):
    assert pipeline.classify_difficulty("How would you implement an LRU cache?") == Difficulty.HARD
    assert pipeline.classify_difficulty("What is a closure?") == Difficulty.EASY
    assert pipeline.classify_difficulty("Tell me about Redis") == Difficulty.MEDIUM
    assert pipeline.classify_difficulty("x" * 200) == Difficulty.HARD


def test_type_classification(pipeline):
    assert pipeline.classify_type("反转链表怎么做") == QuestionType.ALGORITHM
    assert pipeline.classify_type("Design a URL shortener") == QuestionType.SYSTEM_DESIGN
    assert pipeline.classify_type("How does the JVM garbage collector work?") == QuestionType.INTERNALS
    assert pipeline.classify_type("Tell me about a time you had a conflict") == QuestionType.BEHAVIORAL
    assert pipeline.classify_type("Walk me through your last project") == QuestionType.PROJECT
    assert pipeline.classify_type("Which HTTP verbs are idempotent?") == QuestionType.TECHNICAL


def test_company_extraction(pipeline):
    pattern = r"(阿里|腾讯|字节)\S{0,4}(?:面经|一面|二面)"

    assert pipeline.extract_company("字节跳动一面: Redis", pattern) == "字节"
    assert pipeline.extract_company("Interviewing at Tencent last week") == "腾讯"
    assert pipeline.extract_company("A small startup") == "unknown"


def test_ids_are_stable_and_site_scoped(pipeline):
    assert pipeline.build_id("What is MVCC?", "sitea") == pipeline.build_id("  what is  mvcc? ", "sitea")
    assert pipeline.build_id("What is MVCC?", "sitea") != pipeline.build_id("What is MVCC?", "siteb")
    assert len(pipeline.build_id("What is MVCC?", "sitea")) == 24


def test_find_questions_in_numbered_list(pipeline):
    text = "1. 什么是Redis的持久化机制？ 2. MySQL的索引是如何实现的？ 3. 短"

    assert pipeline.find_questions(text) == (
        "什么是Redis的持久化机制？",
        "MySQL的索引是如何实现的？",
    )


def test_pick_question_prefers_title_question(pipeline):
    assert pipeline.pick_question(
        "Explain how Redis eviction works?", "Also asked: what is a bloom filter?"
    ) == "Explain how Redis eviction works?"
    assert pipeline.pick_question(
        "Backend interview notes", "They asked: what is a bloom filter used for?"
    ) == "They asked: what is a bloom filter used for?"
    assert pipeline.pick_question("Backend interview notes", "") == "Backend interview notes"


def test_question_cleanup_keeps_language_names(pipeline):
    assert pipeline.pick_question("Memory model notes for C++", "") == "Memory model notes for C++"
    assert pipeline.pick_question("Tips for C#.", "") == "Tips for C#"
    assert pipeline.pick_question("- .NET garbage collection basics", "") == ".NET garbage collection basics"
    assert pipeline.pick_question("3. Redis notes!!", "") == "Redis notes"


@pytest.mark.parametrize("text,expected", [
    ("15-30K", (15000.0, 30000.0, "month")),
    ("15k-25k·13薪", (15000.0, 25000.0, "month")),
    ("20-40万/年", (200000.0, 400000.0, "year")),
    ("$120,000 - $150,000", (120000.0, 150000.0, "year")),
    ("面议", (None, None, None)),
])
def test_parse_salary(pipeline, text, expected):
    assert pipeline.parse_salary(text) == expected


def test_normalize_question_is_deterministic(pipeline):
    request = CrawlRequest(category="backend", keywords=["redis"])
    item = candidate(
        "Explain how Redis eviction works?",
        "Asked in the 2nd round",
        tags="Redis, 缓存",
    )

    first = pipeline.normalize(item, request)
    second = pipeline.normalize(item, request)

    assert first == second
    assert first.category == Category.BACKEND
    assert first.type == QuestionType.INTERNALS
    assert first.difficulty == Difficulty.MEDIUM
    assert first.company == "unknown"
    assert first.tags == frozenset({"redis", "缓存"})
    assert first.model_dump(mode="json")["tags"] == ["redis", "缓存"]


def test_irrelevant_question_is_dropped(pipeline):
    request = CrawlRequest(category="backend", keywords=["redis"])

    assert pipeline.normalize(candidate("Describe your favourite team ritual?"), request) is None
    assert pipeline.normalize(candidate("", ""), request) is None


def test_normalize_job(pipeline):
    request = CrawlRequest(kind=RecordKind.JOB, category="backend", keywords=["java"])
    item = CrawlCandidate(
        raw_text="Java 实习生 Acme",
        source_url="https://zhipin.test/job/1",
        source_site="zhipin",
        fields={"title": "Java 实习生", "company": "Acme", "salary": "200-300/天", "location": "杭州"},
    )

    job = pipeline.normalize(item, request)

    assert job.title == "Java 实习生"
    assert job.company == "Acme"
    assert job.job_type == JobType.INTERNSHIP
    assert job.education == "unspecified"
    assert job.id == pipeline.build_id("Java 实习生|Acme|杭州", "zhipin")
    assert "java" in job.tags


def test_job_without_title_is_dropped(pipeline):
    request = CrawlRequest(kind=RecordKind.JOB, category="backend")
    item = CrawlCandidate(
        raw_text="Acme",
        source_url="https://zhipin.test/job/1",
        source_site="zhipin",
        fields={"company": "Acme"},
    )

    assert pipeline.normalize(item, request, check_relevance=False) is None


def test_field_failure_becomes_parse_error(pipeline):
    request = CrawlRequest(category="backend", keywords=["redis"])
    item = candidate("Explain how Redis eviction works?")

    with pytest.raises(CrawlerError) as exc_info:
        pipeline.normalize(item, request, company_pattern="(unclosed")

    assert exc_info.value.kind == ErrorKind.PARSE
    assert exc_info.value.field == "company"
    assert exc_info.value.platform == "sitea"
