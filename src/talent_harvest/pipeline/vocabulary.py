"""Fixed vocabularies used for relevance, classification and tagging."""
from typing import Dict, Tuple

from ..models.records import Category, QuestionType


CATEGORY_KEYWORDS: Dict[Category, Tuple[str, ...]] = {
    Category.FRONTEND: ("前端", "frontend", "javascript", "react", "vue", "css", "webpack"),
    Category.BACKEND: ("后端", "backend", "java", "spring", "mysql", "redis", "microservice"),
    Category.ALGORITHM: ("算法", "algorithm", "leetcode", "数据结构", "动态规划", "机器学习"),
    Category.TESTING: ("测试", "testing", "自动化测试", "性能测试", "selenium", "jest"),
    Category.DEVOPS: ("运维", "devops", "kubernetes", "docker", "linux"),
    Category.PRODUCT: ("产品经理", "product manager", "需求分析", "用户体验", "prd", "竞品分析"),
    Category.DATA: ("数据分析", "data analysis", "sql", "python", "tableau", "数据挖掘"),
}

HARD_MARKERS: Tuple[str, ...] = (
    "实现", "原理", "底层", "源码", "优化", "架构", "设计",
    "implement", "implementation", "internals", "under the hood", "source code",
    "optimize", "optimization", "architecture", "design", "distributed",
    "concurrency", "lock-free", "consensus",
)

EASY_MARKERS: Tuple[str, ...] = (
    "什么是", "简述", "概念", "定义", "区别",
    "what is", "what are", "define", "definition", "difference between", "briefly",
)

# Longer than this with no explicit marker is treated as hard
LONG_TEXT_CHARS = 160

# Checked in order, first hit wins
TYPE_MARKERS: Tuple[Tuple[QuestionType, Tuple[str, ...]], ...] = (
    (QuestionType.ALGORITHM, (
        "算法", "数据结构", "动态规划", "链表", "二叉树", "排序",
        "algorithm", "data structure", "leetcode", "binary tree", "linked list",
        "dynamic programming", "time complexity", "sorting",
    )),
    (QuestionType.SYSTEM_DESIGN, (
        "系统设计", "架构", "设计一个", "高并发",
        "system design", "design a", "architecture", "scalability", "high availability",
    )),
    (QuestionType.INTERNALS, (
        "原理", "底层", "源码", "机制",
        "internals", "under the hood", "source code", "how does", "how do", "works",
    )),
    (QuestionType.BEHAVIORAL, (
        "团队", "沟通", "冲突", "职业规划", "优缺点",
        "tell me about a time", "conflict", "teamwork", "weakness", "strength",
    )),
    (QuestionType.PROJECT, (
        "项目", "经验", "project", "experience",
    )),
)

# (display name, aliases)
COMPANIES: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("阿里", ("阿里巴巴", "阿里", "蚂蚁", "alibaba", "ant group")),
    ("腾讯", ("腾讯", "tencent")),
    ("字节", ("字节跳动", "字节", "bytedance", "tiktok")),
    ("百度", ("百度", "baidu")),
    ("美团", ("美团", "meituan")),
    ("京东", ("京东", "jd.com")),
    ("网易", ("网易", "netease")),
    ("华为", ("华为", "huawei")),
    ("小米", ("小米", "xiaomi")),
    ("滴滴", ("滴滴", "didi")),
    ("Google", ("google",)),
    ("Microsoft", ("microsoft",)),
    ("Amazon", ("amazon",)),
    ("Meta", ("meta", "facebook")),
)

UNKNOWN_COMPANY = "unknown"

TAG_VOCABULARY: Tuple[str, ...] = (
    "javascript", "typescript", "react", "vue", "css", "html", "webpack", "node.js",
    "java", "spring", "jvm", "mysql", "postgresql", "redis", "mongodb", "kafka",
    "elasticsearch", "nginx", "docker", "kubernetes", "linux", "python", "golang",
    "c++", "rust", "sql", "http", "tcp", "grpc", "microservice", "leetcode",
    "selenium", "jest", "tableau", "spark", "hadoop", "machine learning",
    "缓存", "数据库", "多线程", "分布式", "消息队列", "微服务", "网络",
)

JOB_TYPE_MARKERS = (
    ("internship", ("实习", "intern")),
    ("part-time", ("兼职", "part-time", "part time")),
    ("contract", ("外包", "合同", "contract", "contractor")),
)
