"""
Baseline Mirror assessment item bank.

36 items balanced across the four constructs:
    - EAI (Epistemic Autonomy Index): 12 items
    - RF (Reflective Flexibility): 8 items
    - SA (Source Awareness): 8 items
    - ARD (Affect Regulation in Debate): 8 items

Each construct includes reverse-coded Likert items for acquiescence bias
detection. Vignette options carry a pre-normalized 1-7 score and the
mechanism the choice reveals.

Items are immutable; the bank is safe to share between concurrent scorers.
"""

from dataclasses import dataclass
from typing import Dict, FrozenSet, List, Optional, Tuple, Union

from libs.domain_types import Construct, ItemType


@dataclass(frozen=True)
class LikertItem:
    id: str
    construct: Construct
    prompt: str
    reverse: bool = False
    schema_tag: Optional[str] = None
    type: ItemType = ItemType.LIKERT7


@dataclass(frozen=True)
class VignetteOption:
    id: str
    text: str
    score: int
    mechanism: Optional[str] = None


@dataclass(frozen=True)
class VignetteItem:
    id: str
    construct: Construct
    prompt: str
    options: Tuple[VignetteOption, ...]
    context: Optional[str] = None
    type: ItemType = ItemType.VIGNETTE

    def option_for_score(self, score: float) -> Optional[VignetteOption]:
        """Return the option carrying ``score``, if any."""
        for option in self.options:
            if option.score == score:
                return option
        return None


AssessmentItem = Union[LikertItem, VignetteItem]


@dataclass(frozen=True)
class AttentionCheckItem:
    """Unscored instructed-response item ("select Strongly Agree")."""

    id: str
    prompt: str
    accepted_values: FrozenSet[int]


# =============================================================================
# EPISTEMIC AUTONOMY INDEX (EAI)
# =============================================================================

_EAI_ITEMS: List[AssessmentItem] = [
    LikertItem(
        id="eai_01",
        construct=Construct.EAI,
        prompt="Before sharing an opinion, I scan for whether it's truly mine.",
    ),
    LikertItem(
        id="eai_02",
        construct=Construct.EAI,
        prompt="When my favorite commentator changes their view, I usually update mine too.",
        reverse=True,
        schema_tag="dependence",
    ),
    LikertItem(
        id="eai_03",
        construct=Construct.EAI,
        prompt=(
            "If my group stopped agreeing with a belief, I'd keep my view if the "
            "evidence still supports it."
        ),
    ),
    LikertItem(
        id="eai_04",
        construct=Construct.EAI,
        prompt="I find it hard to hold an opinion that my community would disapprove of.",
        reverse=True,
        schema_tag="approval_seeking",
    ),
    LikertItem(
        id="eai_05",
        construct=Construct.EAI,
        prompt="I can tell when an idea is mine versus something I absorbed from others.",
    ),
    LikertItem(
        id="eai_06",
        construct=Construct.EAI,
        prompt="My beliefs mostly match those of people I admire.",
        reverse=True,
        schema_tag="dependence",
    ),
    LikertItem(
        id="eai_07",
        construct=Construct.EAI,
        prompt=(
            "When evaluating information, I prioritize whether it's true over "
            "whether it supports my side."
        ),
    ),
    LikertItem(
        id="eai_08",
        construct=Construct.EAI,
        prompt="If everyone around me believes something, I assume it's probably correct.",
        reverse=True,
    ),
    LikertItem(
        id="eai_09",
        construct=Construct.EAI,
        prompt=(
            "I regularly check whether my positions come from my own reasoning "
            "or from tribal loyalty."
        ),
    ),
    LikertItem(
        id="eai_10",
        construct=Construct.EAI,
        prompt="Disagreeing with authority figures makes me feel anxious or guilty.",
        reverse=True,
        schema_tag="punitive_parent",
    ),
    VignetteItem(
        id="eai_11",
        construct=Construct.EAI,
        prompt=(
            "A highly respected leader in your community takes a position you "
            "initially disagreed with."
        ),
        options=(
            VignetteOption(
                "a",
                "I reconsider, they probably see something I don't",
                2,
                "authority_deference",
            ),
            VignetteOption(
                "b",
                "I investigate their reasoning while maintaining my initial doubt",
                7,
                "autonomous_inquiry",
            ),
            VignetteOption(
                "c",
                "I assume they've been captured by bad incentives",
                4,
                "defensive_certainty",
            ),
            VignetteOption(
                "d",
                "I check if this changes my respect for them before evaluating the claim",
                3,
                "identity_first_reasoning",
            ),
        ),
    ),
    VignetteItem(
        id="eai_12",
        construct=Construct.EAI,
        prompt=(
            "You realize a belief you hold is unpopular with both your in-group "
            "and people you respect."
        ),
        options=(
            VignetteOption(
                "a",
                "I quietly drop it, the social cost isn't worth it",
                1,
                "social_pressure_capitulation",
            ),
            VignetteOption(
                "b",
                "I keep it but stop mentioning it publicly",
                4,
                "private_autonomy",
            ),
            VignetteOption(
                "c",
                "I double-check my reasoning, then keep or revise based on evidence alone",
                7,
                "evidence_primary",
            ),
            VignetteOption(
                "d",
                "I get more vocal about it, consensus is often wrong",
                5,
                "contrarian_identity",
            ),
        ),
    ),
]


# =============================================================================
# REFLECTIVE FLEXIBILITY (RF)
# =============================================================================

_RF_ITEMS: List[AssessmentItem] = [
    LikertItem(
        id="rf_01",
        construct=Construct.RF,
        prompt="I can list specific evidence that would change my mind about my strongest beliefs.",
    ),
    LikertItem(
        id="rf_02",
        construct=Construct.RF,
        prompt="Once I've formed a strong opinion, new evidence rarely shifts it.",
        reverse=True,
    ),
    LikertItem(
        id="rf_03",
        construct=Construct.RF,
        prompt="I enjoy listing what could prove me wrong about a belief I hold.",
    ),
    LikertItem(
        id="rf_04",
        construct=Construct.RF,
        prompt="Changing my mind feels like weakness or failure.",
        reverse=True,
        schema_tag="unrelenting_standards",
    ),
    LikertItem(
        id="rf_05",
        construct=Construct.RF,
        prompt="I've meaningfully updated at least one major belief in the past year.",
    ),
    LikertItem(
        id="rf_06",
        construct=Construct.RF,
        prompt=(
            "When I encounter strong counter-evidence, I look for flaws in it "
            "before considering its merit."
        ),
        reverse=True,
    ),
    VignetteItem(
        id="rf_07",
        construct=Construct.RF,
        prompt="A trusted friend presents compelling evidence against one of your core positions.",
        options=(
            VignetteOption(
                "a",
                "I immediately point out weaknesses in their evidence",
                2,
                "defensive_refutation",
            ),
            VignetteOption(
                "b",
                "I acknowledge it's interesting and say I'll think about it",
                5,
                "polite_deflection",
            ),
            VignetteOption(
                "c",
                "I ask them to help me understand what I might be missing",
                7,
                "genuine_inquiry",
            ),
            VignetteOption(
                "d",
                "I feel hurt that they'd challenge something important to me",
                1,
                "emotional_fusion",
            ),
        ),
    ),
    VignetteItem(
        id="rf_08",
        construct=Construct.RF,
        prompt="You discover data that contradicts a position you've publicly defended.",
        options=(
            VignetteOption(
                "a",
                "I look for methodological flaws in the data",
                2,
                "motivated_skepticism",
            ),
            VignetteOption(
                "b",
                "I revise my view and publicly acknowledge the update",
                7,
                "intellectual_honesty",
            ),
            VignetteOption(
                "c",
                "I privately update but don't mention it, too embarrassing",
                4,
                "private_revision",
            ),
            VignetteOption(
                "d",
                "I seek out data that re-confirms my original position",
                1,
                "confirmation_seeking",
            ),
        ),
    ),
]


# =============================================================================
# SOURCE AWARENESS (SA)
# =============================================================================

_SA_ITEMS: List[AssessmentItem] = [
    LikertItem(
        id="sa_01",
        construct=Construct.SA,
        prompt="I can name the first three places I heard the claims I repeat most often.",
    ),
    LikertItem(
        id="sa_02",
        construct=Construct.SA,
        prompt="I rarely think about where my information comes from, I just know it.",
        reverse=True,
    ),
    LikertItem(
        id="sa_03",
        construct=Construct.SA,
        prompt="Before sharing a claim, I trace it back to a primary source.",
    ),
    LikertItem(
        id="sa_04",
        construct=Construct.SA,
        prompt="Most of my news and information comes from 3 or fewer sources.",
        reverse=True,
    ),
    LikertItem(
        id="sa_05",
        construct=Construct.SA,
        prompt="I actively seek out sources that disagree with my current views.",
    ),
    LikertItem(
        id="sa_06",
        construct=Construct.SA,
        prompt="I trust information more when it confirms what I already believe.",
        reverse=True,
    ),
    VignetteItem(
        id="sa_07",
        construct=Construct.SA,
        prompt="Someone asks you where you learned a fact you just stated.",
        options=(
            VignetteOption(
                "a",
                "I can immediately name the source and approximate date",
                7,
                "high_source_tracking",
            ),
            VignetteOption(
                "b",
                "I remember the general source (podcast, article, friend)",
                5,
                "moderate_source_tracking",
            ),
            VignetteOption(
                "c",
                "I'm not sure, it's just something I know",
                2,
                "source_amnesia",
            ),
            VignetteOption(
                "d",
                "I realize I may have absorbed it without verification",
                4,
                "source_awareness_emerging",
            ),
        ),
    ),
    VignetteItem(
        id="sa_08",
        construct=Construct.SA,
        prompt=(
            "You notice all your information on a topic comes from sources that "
            "share your perspective."
        ),
        options=(
            VignetteOption(
                "a",
                "That makes sense, they're the ones who understand it correctly",
                1,
                "epistemic_closure",
            ),
            VignetteOption(
                "b",
                "I seek out at least one high-quality dissenting source",
                7,
                "deliberate_diversification",
            ),
            VignetteOption(
                "c",
                "I note it but don't change my reading habits",
                3,
                "awareness_without_action",
            ),
            VignetteOption(
                "d",
                'I look for a "neutral" source to balance it out',
                5,
                "centrist_correction",
            ),
        ),
    ),
]


# =============================================================================
# AFFECT REGULATION IN DEBATE (ARD)
# =============================================================================

_ARD_ITEMS: List[AssessmentItem] = [
    LikertItem(
        id="ard_01",
        construct=Construct.ARD,
        prompt='When someone refutes "my side," I can stay curious for at least one minute.',
    ),
    LikertItem(
        id="ard_02",
        construct=Construct.ARD,
        prompt="Hearing someone praise a figure I dislike makes me feel angry or disgusted.",
        reverse=True,
    ),
    LikertItem(
        id="ard_03",
        construct=Construct.ARD,
        prompt="I notice my emotional reaction to information before deciding if it's true.",
    ),
    LikertItem(
        id="ard_04",
        construct=Construct.ARD,
        prompt=(
            "When my values are challenged, I feel it physically (tension, heat, "
            "racing heart)."
        ),
        reverse=True,
    ),
    LikertItem(
        id="ard_05",
        construct=Construct.ARD,
        prompt="I can engage with ideas I find morally repugnant without losing my composure.",
    ),
    LikertItem(
        id="ard_06",
        construct=Construct.ARD,
        prompt='If someone from "the other side" makes a good point, I feel betrayed or confused.',
        reverse=True,
        schema_tag="identity_fusion",
    ),
    VignetteItem(
        id="ard_07",
        construct=Construct.ARD,
        prompt="During a discussion, someone misrepresents a position you care deeply about.",
        options=(
            VignetteOption(
                "a",
                "I feel anger rise and immediately correct them with edge in my voice",
                2,
                "reactive_defense",
            ),
            VignetteOption(
                "b",
                "I notice my emotion, pause, then offer a clarification",
                7,
                "regulated_response",
            ),
            VignetteOption(
                "c",
                "I disengage, this person isn't worth engaging with",
                3,
                "defensive_withdrawal",
            ),
            VignetteOption(
                "d",
                "I correct them but feel tense and upset for the next hour",
                4,
                "lingering_dysregulation",
            ),
        ),
    ),
    VignetteItem(
        id="ard_08",
        construct=Construct.ARD,
        prompt=(
            'You read a news headline that triggers strong negative emotion about '
            '"the other side."'
        ),
        options=(
            VignetteOption(
                "a",
                "I share it immediately with a commentary expressing my outrage",
                1,
                "emotional_contagion",
            ),
            VignetteOption(
                "b",
                "I notice the emotional pull and check the source before reacting",
                7,
                "metacognitive_regulation",
            ),
            VignetteOption(
                "c",
                "I read it, feel validated, and move on",
                3,
                "confirmation_comfort",
            ),
            VignetteOption(
                "d",
                "I check if the headline matches the article content",
                6,
                "critical_verification",
            ),
        ),
    ),
]


BASELINE_MIRROR_ITEMS: Tuple[AssessmentItem, ...] = tuple(
    _EAI_ITEMS + _RF_ITEMS + _SA_ITEMS + _ARD_ITEMS
)

_ITEMS_BY_ID: Dict[str, AssessmentItem] = {item.id: item for item in BASELINE_MIRROR_ITEMS}


# =============================================================================
# ATTENTION CHECKS
# =============================================================================
# Instructed-response items interleaved with the bank. They are never scored;
# the integrity checker only verifies that the instructed value was chosen.

ATTENTION_CHECKS: Dict[str, AttentionCheckItem] = {
    "attn_01": AttentionCheckItem(
        id="attn_01",
        prompt="To show you are reading carefully, select Strongly Agree (7).",
        accepted_values=frozenset({7}),
    ),
    "attn_02": AttentionCheckItem(
        id="attn_02",
        prompt="Please select Strongly Disagree (1) for this statement.",
        accepted_values=frozenset({1}),
    ),
}


# =============================================================================
# CONSTRUCT METADATA
# =============================================================================

CONSTRUCT_METADATA: Dict[Construct, Dict[str, object]] = {
    Construct.EAI: {
        "name": "Epistemic Autonomy Index",
        "description": (
            "Measures independence in belief formation from external identities "
            "and authorities"
        ),
        "interpretation": {
            "high": (
                "You demonstrate strong independence in forming and maintaining "
                "beliefs based on evidence rather than social pressure"
            ),
            "moderate": (
                "You show some autonomy but may defer to group consensus or "
                "authority in certain domains"
            ),
            "low": (
                "Your beliefs are substantially shaped by social identity, "
                "authority figures, or group expectations"
            ),
        },
    },
    Construct.RF: {
        "name": "Reflective Flexibility",
        "description": (
            "Measures willingness and ability to revise beliefs in light of "
            "counter-evidence"
        ),
        "interpretation": {
            "high": "You actively seek disconfirmation and update beliefs when evidence warrants",
            "moderate": (
                "You're open to revision in theory but may resist in practice, "
                "especially for core beliefs"
            ),
            "low": (
                "You tend to defend existing positions and experience belief "
                "revision as threatening"
            ),
        },
    },
    Construct.SA: {
        "name": "Source Awareness",
        "description": (
            "Measures conscious tracking of information provenance and source diversity"
        ),
        "interpretation": {
            "high": (
                "You actively track where beliefs originate and deliberately "
                "diversify information sources"
            ),
            "moderate": (
                "You have some awareness of sources but don't consistently track "
                "or diversify"
            ),
            "low": 'You experience beliefs as "just known" without clear memory of their origins',
        },
    },
    Construct.ARD: {
        "name": "Affect Regulation in Debate",
        "description": (
            "Measures capacity to manage emotional reactivity when beliefs are challenged"
        ),
        "interpretation": {
            "high": (
                "You notice emotional triggers and maintain curiosity even when "
                "values are challenged"
            ),
            "moderate": (
                "You can regulate affect in low-stakes debates but struggle when "
                "identity is threatened"
            ),
            "low": "Counter-evidence or out-group arguments trigger strong emotional reactivity",
        },
    },
}

# Cronbach's alpha target per subscale
RELIABILITY_TARGETS: Dict[Construct, float] = {
    Construct.EAI: 0.70,
    Construct.RF: 0.70,
    Construct.SA: 0.70,
    Construct.ARD: 0.70,
}


def get_item(item_id: str) -> Optional[AssessmentItem]:
    """Look up a bank item by id. Unknown ids return None."""
    return _ITEMS_BY_ID.get(item_id)


def items_for_construct(construct: Construct) -> List[AssessmentItem]:
    return [item for item in BASELINE_MIRROR_ITEMS if item.construct == construct]


def is_attention_check(item_id: str) -> bool:
    return item_id in ATTENTION_CHECKS


def bank_size() -> int:
    return len(BASELINE_MIRROR_ITEMS)
