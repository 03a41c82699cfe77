"""
Multilingual greeting messages.

The table maps a language name to a greeting in that language, with the
transliteration in parentheses for non-Latin scripts.
"""

import random
from typing import Dict, NamedTuple


class GreetingMessage(NamedTuple):
    language: str
    message: str


# ========= GREETINGS =========
GREETINGS: Dict[str, str] = {
    "Afrikaans": "Hallo",
    "Albanian": "Përshëndetje (Per-shen-DEAT-ye)",
    "Arabic": "مرحبا (marhabaan)",
    "Azerbaijani": "Salam",
    "Basque": "Kaixo",
    "Breton": "Demat",
    "Bulgarian": "Здравейте (Zdraveĭte)",
    "Catalan": "Hola",
    "Chichewa": "Moni",
    "Corsican": "Bonghjornu",
    "Croatian": "Bok",
    "Czech": "Ahoj",
    "Danish": "Hej",
    "Dutch": "Hallo",
    "English": "Hello",
    "Esperanto": "Saluton",
    "Estonian": "Tere",
    "Filipino": "Kamusta",
    "Finnish": "Hei",
    "French": "Bonjour",
    "Georgian": "მიესალმები (miesalmebi)",
    "German": "Hallo",
    "Greek": "Χαίρε (chai-ray)",
    "Hausa": "Sannu",
    "Hebrew": "שלום (shalom)",
    "Hindi": "नमस्ते (namaste)",
    "Hungarian": "Helló",
    "Irish": "Dia dhuit",
    "Italian": "Ciao",
    "Korean": "안녕하세요 (annyeonghaseyo)",
    "Lao": "ສະບາຍດີ (sabaidi)",
    "Latin": "Salve",
    "Lithuanian": "Sveiki",
    "Maltese": "Bongu",
    "Nepali": "नमस्ते (namaste)",
    "Pashto": "سلام (salam)",
    "Portuguese": "Olá",
    "Romanian": "Buna",
    "Samoan": "Talofa",
    "Shona": "Mhoro",
    "Slovak": "Ahoj",
    "Slovenian": "Zdravo",
    "Spanish": "Hola",
    "Swahili": "Hodi",
    "Tamil": "வணக்கம் (vanakkam)",
    "Turkish": "Merhaba",
    "Vietnamese": "Chào bạn",
    "Welsh": "Helo",
    "Yiddish": "העלא (hela)",
    "Zulu": "Sawubona",
}


def all_messages() -> Dict[str, str]:
    """Return a copy of the greeting table."""
    return dict(GREETINGS)


def random_greeting() -> GreetingMessage:
    """Pick a greeting uniformly at random."""
    language = random.choice(list(GREETINGS))
    return GreetingMessage(language, GREETINGS[language])
