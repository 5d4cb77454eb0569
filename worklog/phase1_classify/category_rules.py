"""
模块 1: 分类规则表 (Category Rule Tables)
职责：集中维护分类器使用的有序正则规则和长度阈值

注意：规则是有顺序的。update 规则先于 thought 规则匹配，
新增规则可能改变已有内容的分类结果，修改后请运行 test_phase1 的回归语料。
"""

import re

CATEGORY_UPDATE = 'update'
CATEGORY_THOUGHT = 'thought'
CATEGORIES = (CATEGORY_UPDATE, CATEGORY_THOUGHT)

# 长度阈值（字符数）
SHORT_THRESHOLD = 50
LONG_THRESHOLD = 200
NOTABLE_LENGTH_THRESHOLD = 200

# update：交付物、完成的任务、固定格式的状态
UPDATE_PATTERNS = [
    r'^Recorded \d+',
    r'^Recorded ',
    r'^Completed ',
    r'^Created ',
    r'^Built ',
    r'^Sent \d+',
    r'^Responded to \d+',
    r'^Reviewed ',
    r'^Hosted ',
    r'^Crushed (leg|back|chest|arm|shoulder)',
    r'^Leg day',
    r'^Back day',
    r'^Chest day',
    r'day \U0001F4AA',
    r'^1:1 with',
    r'^Podcast with',
    r'^Cancelled',
    r'^Refunded',
    r'^Removed ',
    r'^Messaged ',
    r'^Invited ',
    r'^Set up ',
    r'^Fixed ',
    r'^Wrote ',
    r'^Migrated ',
    r'^Outlined ',
    r'^Edited',
    r'^Uploaded',
    r'^Booked ',
    r'^Took thumbnails',
    r'^Prepared for',
    r'^Roasted ',
    r'^Tested ',
    r'^Bought ',
    r'^Iterated ',
    r'^Added ',
    r'^Dealt with',
    r'^Found ',
    r'^Coached ',
    r'^Scoped ',
    r'^Wrapped up',
    r'^Planned out',
    r'^Cut ',
    r'^Reorganized',
    r'^Weekly (Office Hour|Community Call)',
    r'management for (Jan|Feb|Mar|Apr|May|Jun|Jul|Aug|Sep|Oct|Nov|Dec)',
]

# thought：第一人称反思、结论/转折、策略类词汇
THOUGHT_PATTERNS = [
    r'^I (am|was|think|feel|believe|noticed|tried|get)',
    r'^Coming to the conclusion',
    r"^So I'm going to",
    r"^It'll ",
    r'^New (project|idea)',
    r'^Possible ',
    r'^Wow',
    r'^All this to say',
    r'^But if you',
    r'^Second day of',
    r'^Third day of',
    r'^First day of',
    r'^Have been dragging',
    r'^Only six modules',
    r'^Drowning in',
    r'^Feels great',
    r'^Well, I tried',
    r"^That's\.\.\.",
    r'^\w+ is SO',
    r'my \$0\.02',
    r'achievin.*potential',
    r'strategy',
    r'routine',
]

# notable：有价值的洞察、策略思考、明确的"意识到"
NOTABLE_PATTERNS = [
    r'^Coming to the conclusion',
    r'^New (project|idea)',
    r'^Possible strategic',
    r'^All this to say',
    r'^I am achieving',
    r'my \$0\.02',
    r'potential',
    r'strategy',
    r'reminder that',
    r'lesson',
    r'insight',
    r'realiz',
    r'turns out',
    r'free marketing',
    r'mental bandwidth',
    r'shockingly',
]

# 中等长度内容的反思词汇（子串匹配）
REFLECTIVE_WORDS = [
    'think', 'feel', 'believe', 'seems', 'maybe', 'probably', 'honestly', 'frankly',
]


def compile_patterns(patterns):
    """编译正则（大小写不敏感）"""
    return [re.compile(pattern, re.IGNORECASE) for pattern in patterns]
