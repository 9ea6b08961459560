"""
Extraction pipeline: turns crawl candidates into normalized records.

Every classifier here is a pure function of its input text, so the same
candidate always yields the same record (and the same id).
"""
import hashlib
import re
from typing import Callable, FrozenSet, Iterable, Optional, Tuple, TypeVar, Union

from bs4 import BeautifulSoup

from ..core.logging import logger
from ..crawler.errors import CrawlerError
from ..models.records import (
    CrawlCandidate,
    Difficulty,
    InterviewQuestion,
    JobPosition,
    JobType,
    NormalizedRecord,
    QuestionType,
    RecordKind,
)
from ..models.requests import CrawlRequest
from .vocabulary import (
    CATEGORY_KEYWORDS,
    COMPANIES,
    EASY_MARKERS,
    HARD_MARKERS,
    JOB_TYPE_MARKERS,
    LONG_TEXT_CHARS,
    TAG_VOCABULARY,
    TYPE_MARKERS,
    UNKNOWN_COMPANY,
)

T = TypeVar("T")

_HTML_TAGS = (
    r"(?:a|abbr|article|b|blockquote|body|br|button|code|dd|div|dl|dt|em|font|footer|form|"
    r"h[1-6]|head|header|hr|html|i|iframe|img|input|label|li|link|main|meta|nav|noscript|"
    r"ol|p|pre|section|small|span|strong|style|sub|sup|table|tbody|td|th|thead|title|tr|u|ul)"
)
# Lower-case tags with name=value attributes only, so List<String> and a<b stay text
_MARKUP_RE = re.compile(
    r"<!--|</" + _HTML_TAGS + r"\s*>|<" + _HTML_TAGS
    + r"(?:\s+[\w:-]+\s*=\s*(?:\"[^\"]*\"|'[^']*'|[^\s>]+))*\s*/?>"
)
_EMBED_TAG_RE = re.compile(r"<\s*/?\s*(?:script|iframe|object|embed)\b[^>]*>?", re.IGNORECASE)
_SCRIPT_BLOCK_RE = re.compile(r"<\s*script\b.*?(?:<\s*/\s*script\s*>|$)", re.IGNORECASE | re.DOTALL)
_SCRIPT_URI_RE = re.compile(r"\b(?:javascript|vbscript)\s*:", re.IGNORECASE)
_DATA_URI_RE = re.compile(r"\bdata\s*:\s*text/html[^\s]*", re.IGNORECASE)
_EVENT_HANDLER_RE = re.compile(
    r"\bon(?:click|dblclick|load|unload|error|submit|change|input|focus|blur|"
    r"key\w*|mouse\w*|pointer\w*|touch\w*)\s*=\s*(?:\"[^\"]*\"|'[^']*'|[^\s>]+)",
    re.IGNORECASE,
)
_CONTROL_RE = re.compile(r"[\x00-\x1f\x7f-\x9f]")
_ZERO_WIDTH_RE = re.compile(r"[\u200b-\u200f\u2028\u2029\u2060\ufeff]")
_WHITESPACE_RE = re.compile(r"\s+")
_LEADING_JUNK_RE = re.compile(r"^(?:\d+(?:[.)）]\s+|、\s*)|(?!\.[A-Za-z])[\W_])+")
_TRAILING_JUNK_RE = re.compile(r"[^\w?？)）+#]+$")

_QUESTION_PATTERNS = (
    re.compile(r"\d+[.、]\s*([^。？?\n]{10,200}[？?])"),
    re.compile(r"问题?[:：]\s*([^。？?\n]{10,200}[？?])"),
    re.compile(r"面试官?问[:：]?\s*([^。？?\n]{10,200}[？?])"),
    re.compile(r"(?:^|[。!！?？]\s*|\.\s+)([^。!！？?\n]{10,200}[？?])"),
)
_QUESTION_OPENERS_RE = re.compile(r"^(什么|如何|怎样|为什么|哪些|怎么|是否)")

_SALARY_RANGE_RE = re.compile(
    r"(\d+(?:\.\d+)?)\s*([kK千万wW])?\s*(?:-|~|–|至|到|to)\s*(\d+(?:\.\d+)?)\s*([kK千万wW])",
)
_SALARY_DOLLAR_RE = re.compile(
    r"\$\s*([\d,]+(?:\.\d+)?)\s*([kK])?\s*(?:-|–|~|to)\s*\$?\s*([\d,]+(?:\.\d+)?)\s*([kK])?",
)
_SALARY_UNITS = {"k": 1000, "千": 1000, "万": 10000, "w": 10000}

MAX_QUESTION_CHARS = 300
ID_LENGTH = 24


def _is_ascii(term: str) -> bool:
    return all(ord(ch) < 128 for ch in term)


def _term_pattern(term: str) -> re.Pattern:
    return re.compile(r"(?<![a-z0-9])" + re.escape(term) + r"(?![a-z0-9])")


def contains_term(text: str, term: str) -> bool:
    """
    Case-insensitive membership test.

    ASCII terms must sit on word boundaries so ``java`` does not match
    ``javascript``; CJK terms are plain substrings.
    """
    lowered = term.lower()
    if _is_ascii(lowered):
        return _term_pattern(lowered).search(text.lower()) is not None
    return lowered in text.lower()


def _first_match(text: str, terms: Iterable[str]) -> bool:
    return any(contains_term(text, term) for term in terms)


class ExtractionPipeline:
    """Cleans, filters, classifies and identifies crawl candidates."""

    def __init__(self, max_question_chars: int = MAX_QUESTION_CHARS):
        self.max_question_chars = max_question_chars

    # ------------------------------------------------------------------
    # Text primitives
    # ------------------------------------------------------------------

    def clean_text(self, raw: Optional[str]) -> str:
        """
        Reduce raw page text to a single clean line.

        Args:
            raw: Text or HTML fragment

        Returns:
            Trimmed text without markup, control characters, script-injectable
            sequences or repeated whitespace
        """
        if not raw:
            return ""

        text = _SCRIPT_BLOCK_RE.sub(" ", raw)
        if _MARKUP_RE.search(text):
            soup = BeautifulSoup(text, "html.parser")
            for element in soup(["script", "style", "noscript", "iframe"]):
                element.decompose()
            text = soup.get_text(" ")

        text = _SCRIPT_URI_RE.sub("", text)
        text = _DATA_URI_RE.sub("", text)
        text = _EVENT_HANDLER_RE.sub("", text)
        text = _EMBED_TAG_RE.sub(" ", text)
        text = _ZERO_WIDTH_RE.sub("", text)
        text = _CONTROL_RE.sub(" ", text)
        return _WHITESPACE_RE.sub(" ", text).strip()

    def is_relevant(self, candidate: Union[CrawlCandidate, str], request: CrawlRequest) -> bool:
        """True if the text contains a request keyword, or a category keyword when none were given."""
        text = candidate if isinstance(candidate, str) else candidate.raw_text
        text = self.clean_text(text).lower()
        if not text:
            return False

        terms = request.keywords or CATEGORY_KEYWORDS.get(request.category, ())
        return any(term.lower() in text for term in terms)

    def classify_difficulty(self, text: str) -> Difficulty:
        if _first_match(text, HARD_MARKERS):
            return Difficulty.HARD
        if _first_match(text, EASY_MARKERS):
            return Difficulty.EASY
        if len(text) > LONG_TEXT_CHARS:
            return Difficulty.HARD
        return Difficulty.MEDIUM

    def classify_type(self, text: str) -> QuestionType:
        for question_type, markers in TYPE_MARKERS:
            if _first_match(text, markers):
                return question_type
        return QuestionType.TECHNICAL

    def classify_job_type(self, text: str) -> JobType:
        for job_type, markers in JOB_TYPE_MARKERS:
            if _first_match(text, markers):
                return JobType(job_type)
        return JobType.FULL_TIME

    def extract_company(self, text: str, pattern: Optional[str] = None) -> str:
        """
        Find the company a piece of text is about.

        The adapter-supplied regex is tried first (group 1 if present), then
        the known-company vocabulary. Falls back to ``"unknown"``.
        """
        if pattern:
            match = re.search(pattern, text)
            if match:
                found = match.group(1) if match.groups() else match.group(0)
                found = self.clean_text(found)
                if found:
                    return found

        for name, aliases in COMPANIES:
            if _first_match(text, aliases):
                return name

        return UNKNOWN_COMPANY

    def extract_tags(self, text: str) -> FrozenSet[str]:
        return frozenset(term for term in TAG_VOCABULARY if contains_term(text, term))

    def build_id(self, normalized_text: str, site: str) -> str:
        """
        Stable content id.

        Case and whitespace do not affect the id. The site is part of the
        hash input, so identical text on two sites yields two ids.
        """
        key = _WHITESPACE_RE.sub("", normalized_text).lower()
        digest = hashlib.sha256(f"{site}|{key}".encode("utf-8")).hexdigest()
        return digest[:ID_LENGTH]

    # ------------------------------------------------------------------
    # Field helpers
    # ------------------------------------------------------------------

    def _clean_question(self, question: str) -> str:
        cleaned = _WHITESPACE_RE.sub(" ", question).strip()
        cleaned = _LEADING_JUNK_RE.sub("", cleaned)
        cleaned = _TRAILING_JUNK_RE.sub("", cleaned)
        if cleaned and not cleaned.endswith(("?", "？")) and _QUESTION_OPENERS_RE.match(cleaned):
            cleaned += "？"
        return cleaned

    def find_questions(self, text: str) -> Tuple[str, ...]:
        """Question-like sentences in order of appearance, without duplicates."""
        hits = []
        for pattern in _QUESTION_PATTERNS:
            for match in pattern.finditer(text):
                question = self._clean_question(match.group(1))
                if len(question) > 10:
                    hits.append((match.start(1), question))
        hits.sort(key=lambda hit: hit[0])

        ordered = []
        for _, question in hits:
            if question not in ordered:
                ordered.append(question)
        return tuple(ordered)

    def pick_question(self, title: str, content: str) -> str:
        """
        Canonical question text for an interview item.

        Prefers a question sentence in the title, then one in the content,
        then the title itself, then the content.
        """
        for source in (title, content):
            questions = self.find_questions(source) if source else ()
            if questions:
                return questions[0][: self.max_question_chars]
        return self._clean_question(title or content)[: self.max_question_chars]

    def parse_salary(self, text: str) -> Tuple[Optional[float], Optional[float], Optional[str]]:
        """
        Parse a salary range.

        Returns:
            (min, max, period) in absolute currency units; all None when the
            text holds no recognisable range
        """
        if not text:
            return None, None, None

        lowered = text.lower()
        if "年" in text or "year" in lowered or "/yr" in lowered or "annual" in lowered:
            period = "year"
        elif "天" in text or "day" in lowered:
            period = "day"
        elif "时" in text or "hour" in lowered or "/hr" in lowered:
            period = "hour"
        else:
            period = None

        match = _SALARY_DOLLAR_RE.search(text)
        if match:
            low = float(match.group(1).replace(",", ""))
            high = float(match.group(3).replace(",", ""))
            if match.group(2):
                low *= 1000
            if match.group(4) or (match.group(2) and high < 1000):
                high *= 1000
            return low, high, period or "year"

        match = _SALARY_RANGE_RE.search(text)
        if match:
            unit = _SALARY_UNITS[(match.group(4) or match.group(2)).lower()]
            low_unit = _SALARY_UNITS[match.group(2).lower()] if match.group(2) else unit
            return float(match.group(1)) * low_unit, float(match.group(3)) * unit, period or "month"

        return None, None, None

    def _field(self, candidate: CrawlCandidate, field: str, func: Callable[[], T]) -> T:
        try:
            return func()
        except CrawlerError:
            raise
        except Exception as e:
            raise CrawlerError.parse(
                candidate.source_url, field, str(e), platform=candidate.source_site
            ) from e

    def _record_tags(self, candidate: CrawlCandidate, text: str, request: CrawlRequest) -> FrozenSet[str]:
        tags = set(self.extract_tags(text))
        lowered = text.lower()
        tags.update(kw.lower() for kw in request.keywords if kw.lower() in lowered)
        for tag in candidate.field("tags").split(","):
            tag = self.clean_text(tag).lower()
            if tag and len(tag) <= 30:
                tags.add(tag)
        return frozenset(tags)

    # ------------------------------------------------------------------
    # Normalization
    # ------------------------------------------------------------------

    def normalize(
        self,
        candidate: CrawlCandidate,
        request: CrawlRequest,
        company_pattern: Optional[str] = None,
        check_relevance: bool = True,
    ) -> Optional[NormalizedRecord]:
        """
        Turn one candidate into a record.

        Returns:
            The record, or None when the candidate is empty after cleaning
            or (with ``check_relevance``) irrelevant to the request

        Raises:
            CrawlerError: ``parse`` kind naming the field that failed
        """
        if request.kind == RecordKind.JOB:
            return self._normalize_job(candidate, request, company_pattern, check_relevance)
        return self._normalize_question(candidate, request, company_pattern, check_relevance)

    def _normalize_question(
        self,
        candidate: CrawlCandidate,
        request: CrawlRequest,
        company_pattern: Optional[str],
        check_relevance: bool = True,
    ) -> Optional[InterviewQuestion]:
        title = self._field(candidate, "title", lambda: self.clean_text(candidate.field("title")))
        content = self._field(candidate, "content", lambda: self.clean_text(candidate.field("content")))
        text = " ".join(part for part in (title, content) if part) or self.clean_text(candidate.raw_text)

        if not text:
            logger.debug(f"Dropping empty candidate from {candidate.source_site}")
            return None
        if check_relevance and not self.is_relevant(text, request):
            return None

        question = self._field(candidate, "question", lambda: self.pick_question(title, content or text))
        if not question:
            return None

        company_hint = self.clean_text(candidate.field("company"))
        company = company_hint or self._field(
            candidate, "company", lambda: self.extract_company(text, company_pattern)
        )

        return InterviewQuestion(
            id=self.build_id(question, candidate.source_site),
            question=question,
            category=request.category,
            difficulty=self.classify_difficulty(question),
            type=self.classify_type(question),
            company=company,
            tags=self._field(candidate, "tags", lambda: self._record_tags(candidate, text, request)),
            source_url=candidate.source_url,
            source_site=candidate.source_site,
            crawled_at=candidate.extracted_at,
        )

    def _normalize_job(
        self,
        candidate: CrawlCandidate,
        request: CrawlRequest,
        company_pattern: Optional[str],
        check_relevance: bool = True,
    ) -> Optional[JobPosition]:
        values = {
            name: self._field(candidate, name, lambda name=name: self.clean_text(candidate.field(name)))
            for name in (
                "title", "company", "salary", "location",
                "experience", "education", "description", "requirements",
            )
        }

        title = values["title"]
        if not title:
            logger.debug(f"Dropping job candidate without title from {candidate.source_site}")
            return None

        text = " ".join(v for v in values.values() if v)
        if check_relevance and not self.is_relevant(text, request):
            return None

        company = values["company"] or self._field(
            candidate, "company", lambda: self.extract_company(text, company_pattern)
        )
        salary_min, salary_max, period = self._field(
            candidate, "salary", lambda: self.parse_salary(values["salary"])
        )
        identity = f"{title}|{company}|{values['location']}"

        return JobPosition(
            id=self.build_id(identity, candidate.source_site),
            title=title,
            category=request.category,
            company=company,
            salary=values["salary"] or "negotiable",
            salary_min=salary_min,
            salary_max=salary_max,
            salary_period=period,
            location=values["location"] or "unspecified",
            experience=values["experience"] or "unspecified",
            education=values["education"] or "unspecified",
            job_type=self.classify_job_type(f"{title} {values['description']}"),
            description=values["description"],
            requirements=values["requirements"],
            tags=self._field(candidate, "tags", lambda: self._record_tags(candidate, text, request)),
            source_url=candidate.source_url,
            source_site=candidate.source_site,
            crawled_at=candidate.extracted_at,
        )
