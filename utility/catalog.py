"""
Static per-language catalog: valid topics, valid writers, TTS voice and the
phrase the prompt starts with.
Built once at import time and exposed read-only.
"""
from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Tuple

from utility.errors import InvalidLanguage


@dataclass(frozen=True)
class VoiceConfig:
    language_code: str  # e.g. "en-US"
    voice_name: str  # e.g. "en-US-Wavenet-D"
    gender: str = "FEMALE"


@dataclass(frozen=True)
class LanguageCatalog:
    language: str
    topics: Tuple[str, ...]
    writers: Tuple[str, ...]
    voice: VoiceConfig
    prompt_prefix: str

    def build_prompt(self, topic: str) -> str:
        return f"{self.prompt_prefix}{topic}"


def _unique(items) -> Tuple[str, ...]:
    """Drop duplicates, keep first-seen order"""
    return tuple(dict.fromkeys(items))


# -----------------------------
# English
# -----------------------------
ENGLISH_TOPICS = _unique([
    "gratitude", "forgiveness", "healing", "strength", "protection",
    "guidance", "peace", "love", "compassion", "courage",
    "wisdom", "patience", "faith", "hope", "charity", "kindness",
    "understanding", "reconciliation", "unity", "humility",
    "mercy", "justice", "truth", "joy", "grace", "devotion",
    "reverence", "redemption", "salvation", "praise", "thanksgiving",
    "intercession", "confession", "consecration", "dedication",
    "adoration", "benediction", "petition", "supplication",
    "lamentation", "meditation", "reflection", "renewal",
    "revival", "restoration", "sanctification", "deliverance",
    "enlightenment", "faithfulness", "fidelity", "sincerity",
    "sobriety", "chastity", "simplicity", "stewardship", "evangelism",
    "discipleship", "servanthood", "mission", "vocation", "ministry",
    "fellowship", "community", "family", "marriage", "parenting",
    "friendship", "work", "school", "learning", "teaching", "growth",
    "maturity", "perseverance", "endurance", "provision", "safety",
    "peacekeeping", "defense", "healing of nations", "environment",
    "creation", "animal welfare", "agriculture", "science",
    "technology", "arts", "literature", "music", "sports", "leisure",
    "health", "mental health", "well-being", "prosperity", "wealth",
    "poverty", "equality", "freedom", "human rights", "democracy",
    "government", "leadership",
])

ENGLISH_WRITERS = _unique([
    "William Shakespeare", "Jane Austen", "Charles Dickens", "Leo Tolstoy", "Mark Twain",
    "Homer", "Edgar Allan Poe", "J.K. Rowling", "George Orwell", "Ernest Hemingway",
    "Fyodor Dostoevsky", "Emily Dickinson", "Virginia Woolf", "James Joyce", "Gabriel Garcia Marquez",
    "Franz Kafka", "F. Scott Fitzgerald", "Herman Melville", "T.S. Eliot", "John Steinbeck",
    "Oscar Wilde", "Mary Shelley", "H.G. Wells", "George Eliot", "Thomas Hardy",
    "Ralph Waldo Emerson", "Henry David Thoreau", "Walt Whitman", "Robert Frost", "Maya Angelou",
    "Sylvia Plath", "Toni Morrison", "Harper Lee", "Kurt Vonnegut", "Ray Bradbury",
    "J.R.R. Tolkien", "C.S. Lewis", "Isaac Asimov", "Arthur C. Clarke", "Philip K. Dick",
    "Margaret Atwood", "Ursula K. Le Guin", "Aldous Huxley", "H.P. Lovecraft", "Agatha Christie",
    "Arthur Conan Doyle", "J.D. Salinger", "Jack Kerouac", "Ernest J. Gaines", "Octavia E. Butler",
    "Vladimir Nabokov", "E. E. Cummings", "D.H. Lawrence", "William Faulkner", "Tennessee Williams",
    "L. Frank Baum", "Louisa May Alcott", "Jules Verne", "Robert Louis Stevenson", "Nathaniel Hawthorne",
    "Charles Baudelaire", "Marcel Proust", "Albert Camus", "Jean-Paul Sartre", "Simone de Beauvoir",
    "Isabel Allende", "Pablo Neruda", "Jorge Luis Borges", "Carlos Fuentes",
    "Mario Vargas Llosa", "Miguel de Cervantes", "Edith Wharton", "Thomas Mann", "Herman Hesse",
])

# -----------------------------
# French
# -----------------------------
FRENCH_TOPICS = _unique([
    "gratitude", "pardon", "guérison", "force", "protection",
    "guidance", "paix", "amour", "compassion", "courage",
    "sagesse", "patience", "foi", "espérance", "charité", "bonté",
    "réconciliation", "unité", "humilité", "miséricorde", "justice",
    "vérité", "joie", "grâce", "dévotion", "rédemption", "louange",
    "action de grâce", "méditation", "renouveau", "délivrance",
    "fidélité", "simplicité", "communauté", "famille", "mariage",
    "amitié", "travail", "école", "santé", "liberté", "création",
])

FRENCH_WRITERS = _unique([
    "Victor Hugo", "Molière", "Jean de La Fontaine", "Voltaire", "Jean-Jacques Rousseau",
    "Gustave Flaubert", "Émile Zola", "Honoré de Balzac", "Alexandre Dumas", "Stendhal",
    "Charles Baudelaire", "Arthur Rimbaud", "Paul Verlaine", "Marcel Proust", "Albert Camus",
    "Jean-Paul Sartre", "Simone de Beauvoir", "Antoine de Saint-Exupéry", "Colette", "Marguerite Yourcenar",
    "Blaise Pascal", "Paul Claudel", "Charles Péguy", "François Mauriac", "Georges Bernanos",
])

# -----------------------------
# Arabic
# -----------------------------
ARABIC_TOPICS = _unique([
    "الشكر", "المغفرة", "الشفاء", "القوة", "الحماية",
    "الهداية", "السلام", "المحبة", "الرحمة", "الشجاعة",
    "الحكمة", "الصبر", "الإيمان", "الأمل", "الإحسان", "اللطف",
    "المصالحة", "الوحدة", "التواضع", "العدل", "الحق", "الفرح",
    "التوبة", "التسبيح", "التأمل", "التجديد", "الخلاص", "الوفاء",
    "البساطة", "الأسرة", "الزواج", "الصداقة", "العمل", "العلم",
    "الصحة", "الحرية", "الرزق", "الأمان",
])

ARABIC_WRITERS = _unique([
    "جبران خليل جبران", "نجيب محفوظ", "محمود درويش", "نزار قباني", "أحمد شوقي",
    "طه حسين", "المتنبي", "أبو العلاء المعري", "ابن عربي", "جلال الدين الرومي",
    "ميخائيل نعيمة", "إيليا أبو ماضي", "بدر شاكر السياب", "الطيب صالح", "غسان كنفاني",
    "أدونيس", "فدوى طوقان", "مي زيادة", "عباس محمود العقاد", "توفيق الحكيم",
])


CATALOGS: Mapping[str, LanguageCatalog] = MappingProxyType({
    "english": LanguageCatalog(
        language="english",
        topics=ENGLISH_TOPICS,
        writers=ENGLISH_WRITERS,
        voice=VoiceConfig(language_code="en-US", voice_name="en-US-Wavenet-D"),
        prompt_prefix="Generate a prayer about ",
    ),
    "french": LanguageCatalog(
        language="french",
        topics=FRENCH_TOPICS,
        writers=FRENCH_WRITERS,
        voice=VoiceConfig(language_code="fr-FR", voice_name="fr-FR-Wavenet-A"),
        prompt_prefix="Écris une prière sur le thème suivant : ",
    ),
    "arabic": LanguageCatalog(
        language="arabic",
        topics=ARABIC_TOPICS,
        writers=ARABIC_WRITERS,
        voice=VoiceConfig(language_code="ar-XA", voice_name="ar-XA-Wavenet-A"),
        prompt_prefix="اكتب دعاءً عن ",
    ),
})


def supported_languages() -> Tuple[str, ...]:
    return tuple(CATALOGS.keys())


def get_catalog(language: str) -> LanguageCatalog:
    """Return the catalog for `language` or raise InvalidLanguage"""
    try:
        return CATALOGS[language]
    except (KeyError, TypeError):
        raise InvalidLanguage(str(language)) from None
