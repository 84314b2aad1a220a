"""Static education content served alongside the simulator."""
from pydantic import BaseModel, Field


class Hotline(BaseModel):
    phone: str
    address: str
    website: str


class EducationContent(BaseModel):
    """Education screen payload."""
    title: str
    lessons: list[str]
    quit_tips: list[str]
    hotline: Hotline
    reflection_prompt: str
    pattern_notes: list[str] = Field(default_factory=list)


LESSONS = [
    "The house edge guarantees the operator's profit over the long run.",
    "Near-misses and intermittent rewards increase engagement without improving your odds.",
    "Many victims sell valuables or borrow money to cover their losses.",
    "Gambling is designed to keep you playing even while you lose.",
]

QUIT_TIPS = [
    "Limit the time and money you spend.",
    "Delete gambling apps and avoid trigger zones.",
    "Ask family and friends for support.",
    "Focus on positive activities like sport or a new hobby.",
]

# Dummy contact details for the demo
HOTLINE = Hotline(
    phone="0800-ANTIJUDI",
    address="Pusat Bantuan Lokal: Jl. Edukasi No. 123",
    website="www.antijudi.org",
)

REFLECTION_PROMPT = (
    "Take a photo of something valuable you could lose to a gambling habit "
    "(your phone, motorbike, laptop)."
)

PATTERN_NOTES = [
    "This simulation shows how the house edge and small manipulations add up to long-term losses.",
    "Near-misses make you feel you 'almost won' and push you to keep spinning.",
    "Occasional wins (intermittent rewards) do not change the fact that the system favours the house.",
]


def education_content() -> EducationContent:
    return EducationContent(
        title="Why does gambling make you poorer?",
        lessons=list(LESSONS),
        quit_tips=list(QUIT_TIPS),
        hotline=HOTLINE,
        reflection_prompt=REFLECTION_PROMPT,
        pattern_notes=list(PATTERN_NOTES),
    )


def build_share_poster(total_loss: int, total_spins: int) -> str:
    """Shareable end-of-simulation poster text."""
    return "\n".join(
        [
            "🚫 I FINISHED THE ANTI-GAMBLING SIMULATION!",
            "",
            f"Total loss: Rp {total_loss}",
            f"Total spins: {total_spins}",
            "",
            "Conclusion: gambling ALWAYS loses in the long run!",
            "",
            "Stay alert to the dangers of gambling and addiction.",
            "",
            "#AntiJudi #EdukasiBahayaJudi #SDG3 #SDG4",
        ]
    )
