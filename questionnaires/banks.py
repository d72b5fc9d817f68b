"""
Static question banks, one per assessment.

Banks are defined at deploy time and never mutated at runtime. Question ids
are ordinals ("1".."N") within their assessment; each question carries at
most one scoring category.
"""
from typing import Dict, List, Optional, Sequence, Tuple

from questionnaires.questions import Assessment, Question


def _bank(
    assessment_id: str,
    name: str,
    description: str,
    categories: Sequence[str],
    items: Sequence[Tuple[str, Optional[str]]],
    kind: str = "ranked",
    estimated_minutes: int = 10,
) -> Assessment:
    questions = tuple(
        Question(id=str(i), text=text, category=category, order=i)
        for i, (text, category) in enumerate(items, start=1)
    )
    return Assessment(
        id=assessment_id,
        name=name,
        description=description,
        questions=questions,
        categories=tuple(categories),
        kind=kind,
        estimated_minutes=estimated_minutes,
    )


# -----------------------------
# Spiritual gifts
# -----------------------------

SPIRITUAL_GIFTS = _bank(
    "spiritual-gifts",
    "Spiritual Gifts Assessment",
    "Discover the unique abilities God has given you to serve His kingdom",
    [
        "administration", "mercy", "teaching", "exhortation", "serving", "giving",
        "discernment", "leadership", "faith", "prophecy", "shepherding",
    ],
    [
        ("I enjoy organizing people, tasks, and events to accomplish a goal.", "administration"),
        ("I feel deeply moved when I see people in physical or emotional need.", "mercy"),
        ("I love studying Scripture and uncovering deeper biblical truths.", "teaching"),
        ("I find it natural to inspire and motivate others toward spiritual growth.", "exhortation"),
        ("I am quick to offer practical help when someone has a tangible need.", "serving"),
        ("I am generous with my resources and find joy in meeting financial needs.", "giving"),
        ("I can sense when something is spiritually true or false.", "discernment"),
        ("I enjoy leading others and providing clear direction for groups.", "leadership"),
        ("I believe God can do the impossible and I inspire others to trust Him.", "faith"),
        ("I receive insights from God about His plans and purposes.", "prophecy"),
        ("I enjoy caring for people's spiritual well-being over long periods.", "shepherding"),
        ("I easily explain biblical concepts in ways others can understand.", "teaching"),
        ("I naturally create systems and structures that help things run smoothly.", "administration"),
        ("I am drawn to serve those who are hurting, suffering, or marginalized.", "mercy"),
        ("I find great satisfaction in encouraging others to keep going.", "exhortation"),
        ("I prefer to work behind the scenes to support others' ministries.", "serving"),
        ("I trust God will provide for me as I give generously to His work.", "giving"),
        ("I can identify spiritual deception or unhealthy influences.", "discernment"),
        ("I am confident taking responsibility for the spiritual direction of a group.", "leadership"),
        ("I believe God speaks through me to bring correction or encouragement.", "prophecy"),
    ],
    estimated_minutes=15,
)


# -----------------------------
# Seasonal (questions 8, 13 and 15 are untagged)
# -----------------------------

SEASONAL = _bank(
    "seasonal",
    "Seasonal Assessment",
    "Discover where you are in your spiritual journey",
    ["spring", "summer", "fall", "winter"],
    [
        ("Right now, I feel spiritually energized and growing.", "summer"),
        ("I am experiencing significant life changes or transitions.", "fall"),
        ("I feel like God is teaching me new things regularly.", "spring"),
        ("I sense God is preparing me for something bigger.", "spring"),
        ("My spiritual practices feel dry or routine right now.", "winter"),
        ("I am experiencing fruitfulness in ministry or service.", "summer"),
        ("I feel like I'm in a waiting period spiritually.", "winter"),
        ("God feels very close and I'm hearing Him clearly.", None),
        ("I'm facing significant challenges or spiritual warfare.", "winter"),
        ("I see evidence of breakthrough and answered prayers.", "summer"),
        ("I feel hungry for more of God's presence.", "spring"),
        ("My faith is being tested in significant ways.", "winter"),
        ("I am seeing growth in areas I've been working on.", None),
        ("I sense God is calling me to rest and renewal.", "fall"),
        ("I feel aligned with God's purposes for my life right now.", None),
    ],
)


# -----------------------------
# Prophetic expression
# -----------------------------

PROPHETIC_EXPRESSION = _bank(
    "prophetic-expression",
    "Prophetic Expression Assessment",
    "Understand how the prophetic flows through you",
    ["seer", "prophet", "intercessor", "worship", "acts"],
    [
        ("God often speaks to me through dreams or visions.", "seer"),
        ("I feel compelled to speak out when I sense what God is saying.", "prophet"),
        ("I receive insight from God most often while I am praying.", "intercessor"),
        ("Songs or melodies come to me that seem to carry a message from God.", "worship"),
        ("I sometimes feel led to act out a message rather than just say it.", "acts"),
        ("I see pictures in my mind that carry spiritual meaning.", "seer"),
        ("I can deliver a hard word with boldness when God asks me to.", "prophet"),
        ("I feel God's emotions for people as I pray for them.", "intercessor"),
        ("The prophetic flows most naturally for me during worship.", "worship"),
        ("I express what God is saying through creative or symbolic actions.", "acts"),
        ("I notice spiritual realities in a room that others seem to miss.", "seer"),
        ("People tell me my words brought clarity or correction at the right time.", "prophet"),
        ("I carry prayer burdens until I sense a breakthrough.", "intercessor"),
        ("Spontaneous worship often opens up revelation for me or others.", "worship"),
        ("I use art, drama, or objects to communicate spiritual truth.", "acts"),
        ("Demonstrating a message helps people remember it better than words alone.", "acts"),
    ],
    estimated_minutes=12,
)


# -----------------------------
# Ministry calling
# -----------------------------

MINISTRY_CALLING = _bank(
    "ministry-calling",
    "Ministry Calling Assessment",
    "Identify where you're called to serve in God's kingdom",
    ["teaching", "pastoral", "evangelism", "worship", "administration", "missions", "prayer"],
    [
        ("I love preparing and teaching lessons from Scripture.", "teaching"),
        ("I am drawn to walk with people through hard seasons of life.", "pastoral"),
        ("I look for opportunities to share the Gospel with people who don't know Jesus.", "evangelism"),
        ("I feel most alive when leading others in worship.", "worship"),
        ("I enjoy organizing ministry operations so things run smoothly.", "administration"),
        ("I feel a pull toward serving people from other cultures or nations.", "missions"),
        ("I regularly set aside extended time to pray for others.", "prayer"),
        ("People often ask me to explain what a passage of the Bible means.", "teaching"),
        ("I naturally check in on people and follow up on how they are doing.", "pastoral"),
        ("Conversations about faith with strangers come easily to me.", "evangelism"),
        ("I use music or the arts to help people encounter God.", "worship"),
        ("I enjoy planning events, budgets, or volunteer schedules.", "administration"),
        ("I would consider relocating to serve where the Gospel is not known.", "missions"),
        ("I feel burdened to pray for my church, city, and nation.", "prayer"),
        ("I want to equip others to study the Bible for themselves.", "teaching"),
        ("I am willing to invest in the same people over many years.", "pastoral"),
        ("I am moved by the thought of people who have never heard the Gospel.", "evangelism"),
        ("I follow missionaries' work closely and support them when I can.", "missions"),
    ],
    estimated_minutes=15,
)


# -----------------------------
# Redemptive gifts (Romans 12)
# -----------------------------

REDEMPTIVE_GIFTS = _bank(
    "redemptive-gifts",
    "Redemptive Gifts Assessment",
    "Understand your unique God-given perspective and design",
    ["prophet", "servant", "teacher", "exhorter", "giver", "ruler", "mercy"],
    [
        ("I quickly notice when something is out of alignment with what is right.", "prophet"),
        ("I see practical needs and meet them without being asked.", "servant"),
        ("I want to verify that what is taught is accurate before I accept it.", "teacher"),
        ("I enjoy helping people figure out practical steps to grow.", "exhorter"),
        ("I look for ways to use my resources to strengthen God's work.", "giver"),
        ("I naturally see the big picture and how to organize people to reach it.", "ruler"),
        ("I sense when someone is hurting even if they don't say so.", "mercy"),
        ("I see situations in terms of right and wrong.", "prophet"),
        ("I feel fulfilled helping others succeed in their roles.", "servant"),
        ("I love researching a topic thoroughly.", "teacher"),
        ("People come to me for encouragement and advice.", "exhorter"),
        ("I am careful with my own spending so I can give more.", "giver"),
        ("I enjoy taking a project from vision to completion.", "ruler"),
        ("I am drawn to people others tend to overlook.", "mercy"),
        ("I would rather hear the hard truth than a comfortable lie.", "prophet"),
        ("I find it hard to say no when someone needs help.", "servant"),
        ("I present ideas in a careful, systematic way.", "teacher"),
        ("I can see potential in people that they don't see in themselves.", "exhorter"),
        ("I like to invest in initiatives that will multiply over time.", "giver"),
        ("Others look to me to delegate and coordinate tasks.", "ruler"),
        ("I create safe spaces where people feel free to share their pain.", "mercy"),
        ("I am willing to stand alone for what I believe.", "prophet"),
        ("I prefer working behind the scenes to being in front.", "servant"),
        ("Accuracy in details matters a great deal to me.", "teacher"),
        ("I want my giving to be strategic and make a lasting difference.", "giver"),
    ],
    estimated_minutes=18,
)


# -----------------------------
# Spiritual maturity
# -----------------------------

SPIRITUAL_MATURITY = _bank(
    "spiritual-maturity",
    "Spiritual Maturity Assessment",
    "Assess where you are in your spiritual development",
    ["knowledge", "prayer", "character", "service", "disciplines"],
    [
        ("I understand the main storyline and themes of the Bible.", "knowledge"),
        ("I pray consistently, not just in times of need.", "prayer"),
        ("I respond with patience and kindness even when provoked.", "character"),
        ("I regularly use my gifts to serve others in my church.", "service"),
        ("I keep a regular rhythm of Bible reading.", "disciplines"),
        ("I can apply Scripture to everyday decisions.", "knowledge"),
        ("I sense God's leading when I pray.", "prayer"),
        ("I quickly ask for forgiveness when I have wronged someone.", "character"),
        ("I look for ways to serve outside of church programs.", "service"),
        ("I practice rest and sabbath intentionally.", "disciplines"),
        ("I could explain the basics of my faith to someone else.", "knowledge"),
        ("I pray for others by name on a regular basis.", "prayer"),
        ("The fruit of the Spirit is increasingly visible in my life.", "character"),
        ("I am investing in someone else's spiritual growth.", "service"),
        ("Fasting, worship, or solitude are part of my regular practice.", "disciplines"),
    ],
    kind="maturity",
    estimated_minutes=12,
)


QUESTION_BANKS: Dict[str, Assessment] = {
    bank.id: bank
    for bank in (
        SPIRITUAL_GIFTS,
        SEASONAL,
        PROPHETIC_EXPRESSION,
        MINISTRY_CALLING,
        REDEMPTIVE_GIFTS,
        SPIRITUAL_MATURITY,
    )
}


def get_assessment(assessment_id: str) -> Optional[Assessment]:
    return QUESTION_BANKS.get(assessment_id)


def get_questions(assessment_id: str) -> List[Question]:
    """
    Ordered questions for an assessment.
    An unknown id yields an empty list rather than an exception.
    """
    assessment = QUESTION_BANKS.get(assessment_id)
    if assessment is None:
        return []
    return list(assessment.questions)


def list_assessments() -> List[Assessment]:
    return list(QUESTION_BANKS.values())
