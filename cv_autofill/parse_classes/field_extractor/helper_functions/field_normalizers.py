"""field_normalizers.py
Maps free-text values (language names and levels, cantons) onto the canonical
values stored in a CandidateProfileDraft, and holds the known skill vocabulary.
"""
import re
from typing import List, Optional

# --------------------------------------------------------------
# LANGUAGES
# --------------------------------------------------------------
# Canonical (English) name -> spellings seen in EN / DE / FR / IT CVs
LANGUAGE_NAME_VARIANTS = {
    "German": ["german", "deutsch", "allemand", "tedesco"],
    "Swiss German": ["swiss german", "schweizerdeutsch", "suisse allemand", "svizzero tedesco"],
    "English": ["english", "englisch", "anglais", "inglese"],
    "French": ["french", "französisch", "franzoesisch", "francais", "français", "francese"],
    "Italian": ["italian", "italienisch", "italien", "italiano"],
    "Romansh": ["romansh", "rätoromanisch", "romanche", "romancio"],
    "Spanish": ["spanish", "spanisch", "espagnol", "spagnolo", "español", "espanol"],
    "Portuguese": ["portuguese", "portugiesisch", "portugais", "portoghese", "português"],
    "Dutch": ["dutch", "niederländisch", "néerlandais", "olandese"],
    "Russian": ["russian", "russisch", "russe", "russo"],
    "Polish": ["polish", "polnisch", "polonais", "polacco"],
    "Turkish": ["turkish", "türkisch", "turc", "turco"],
    "Arabic": ["arabic", "arabisch", "arabe", "arabo"],
    "Chinese": ["chinese", "chinesisch", "chinois", "cinese", "mandarin"],
    "Japanese": ["japanese", "japanisch", "japonais", "giapponese"],
    "Korean": ["korean", "koreanisch", "coréen", "coreano"],
    "Hindi": ["hindi"],
    "Greek": ["greek", "griechisch", "grec", "greco"],
    "Swedish": ["swedish", "schwedisch", "suédois", "svedese"],
    "Danish": ["danish", "dänisch", "danois", "danese"],
    "Norwegian": ["norwegian", "norwegisch", "norvégien", "norvegese"],
    "Finnish": ["finnish", "finnisch", "finnois", "finlandese"],
    "Czech": ["czech", "tschechisch", "tchèque", "ceco"],
    "Hungarian": ["hungarian", "ungarisch", "hongrois", "ungherese"],
    "Romanian": ["romanian", "rumänisch", "roumain", "rumeno"],
    "Croatian": ["croatian", "kroatisch", "croate", "croato"],
    "Serbian": ["serbian", "serbisch", "serbe", "serbo"],
    "Bulgarian": ["bulgarian", "bulgarisch", "bulgare", "bulgaro"],
    "Ukrainian": ["ukrainian", "ukrainisch", "ukrainien", "ucraino"],
    "Albanian": ["albanian", "albanisch", "albanais", "albanese"],
    "Hebrew": ["hebrew", "hebräisch", "hébreu", "ebraico"],
    "Persian": ["persian", "persisch", "persan", "persiano", "farsi"],
    "Vietnamese": ["vietnamese", "vietnamesisch", "vietnamien", "vietnamita"],
    "Thai": ["thai", "thailändisch", "thaï"],
    "Tamil": ["tamil"],
}

LANGUAGE_NAMES = {
    variant: canonical
    for canonical, variants in LANGUAGE_NAME_VARIANTS.items()
    for variant in variants + [canonical.lower()]
}

# Keyword -> level. Longest keyword wins ("upper intermediate" before "intermediate").
LANGUAGE_LEVEL_KEYWORDS = {
    "native": "Native", "native speaker": "Native", "mother tongue": "Native",
    "muttersprache": "Native", "muttersprachlich": "Native", "langue maternelle": "Native",
    "madrelingua": "Native", "lingua madre": "Native", "bilingual": "Native",
    "zweisprachig": "Native", "bilingue": "Native",
    "fluent": "C2", "fliessend": "C2", "fließend": "C2", "verhandlungssicher": "C2",
    "courant": "C2", "couramment": "C2", "proficient": "C2",
    "advanced": "C1", "fortgeschritten": "C1", "sehr gut": "C1", "very good": "C1",
    "avancé": "C1", "avanzato": "C1", "ottimo": "C1",
    "upper intermediate": "B2", "gute mittelstufe": "B2", "good": "B2", "gut": "B2",
    "bon": "B2", "buono": "B2",
    "intermediate": "B1", "mittelstufe": "B1", "intermédiaire": "B1", "intermedio": "B1",
    "elementary": "A2", "basic": "A2", "grundkenntnisse": "A2", "basics": "A2",
    "notions": "A2", "scolastico": "A2",
    "beginner": "A1", "anfänger": "A1", "débutant": "A1", "principiante": "A1",
}

CEFR_REGEX = re.compile(r"(?<![A-Za-z0-9])([ABCabc][12])(?![A-Za-z0-9])")


def normalize_language_name(value: str) -> Optional[str]:
    """
    Return the canonical English name of a language, or None if unknown.

    Parenthesized qualifiers are ignored ("Chinese (Mandarin)" -> "Chinese").

    Example
    -------
    >>> normalize_language_name("Deutsch")
    'German'
    """
    if not value:
        return None
    cleaned = re.sub(r"\(.*?\)", " ", value).strip(" .:-–").lower()
    cleaned = re.sub(r"\s+", " ", cleaned)
    return LANGUAGE_NAMES.get(cleaned)


def normalize_language_level(value: str) -> Optional[str]:
    """
    Map a level description to a CEFR level or "Native".

    An explicit CEFR token ("C1", "fluent (B2)") takes precedence over keywords.

    Returns:
        Optional[str]: One of A1..C2 or "Native", or None if nothing matched.
    """
    if not value:
        return None

    cefr = CEFR_REGEX.search(value)
    if cefr:
        return cefr.group(1).upper()

    lowered = value.lower()
    for keyword in sorted(LANGUAGE_LEVEL_KEYWORDS, key=len, reverse=True):
        if re.search(rf"(?<!\w){re.escape(keyword)}(?!\w)", lowered):
            return LANGUAGE_LEVEL_KEYWORDS[keyword]
    return None


# --------------------------------------------------------------
# CANTONS
# --------------------------------------------------------------
SWISS_CANTONS = [
    "AG", "AR", "AI", "BL", "BS", "BE", "FR", "GE", "GL", "GR", "JU", "LU", "NE",
    "NW", "OW", "SH", "SZ", "SO", "SG", "TG", "TI", "UR", "VD", "VS", "ZG", "ZH",
]

# German, French and Italian canton names (several double as the capital's name)
CANTON_NAMES = {
    # German
    "aargau": "AG", "appenzell ausserrhoden": "AR", "appenzell innerrhoden": "AI",
    "basel-landschaft": "BL", "basel-stadt": "BS", "basel": "BS", "bern": "BE",
    "freiburg": "FR", "genf": "GE", "glarus": "GL", "graubünden": "GR", "jura": "JU",
    "luzern": "LU", "neuenburg": "NE", "nidwalden": "NW", "obwalden": "OW",
    "schaffhausen": "SH", "schwyz": "SZ", "solothurn": "SO", "st. gallen": "SG",
    "st.gallen": "SG", "sankt gallen": "SG", "thurgau": "TG", "tessin": "TI", "uri": "UR",
    "waadt": "VD", "wallis": "VS", "zug": "ZG", "zürich": "ZH", "zurich": "ZH",
    "chur": "GR", "aarau": "AG", "frauenfeld": "TG", "sion": "VS", "lausanne": "VD",
    "bellinzona": "TI", "lugano": "TI", "winterthur": "ZH", "biel": "BE",
    # French
    "argovie": "AG", "bâle-campagne": "BL", "bâle-ville": "BS", "bâle": "BS",
    "berne": "BE", "fribourg": "FR", "genève": "GE", "geneve": "GE", "glaris": "GL",
    "grisons": "GR", "lucerne": "LU", "neuchâtel": "NE", "neuchatel": "NE",
    "saint-gall": "SG", "schaffhouse": "SH", "soleure": "SO", "thurgovie": "TG",
    "vaud": "VD", "valais": "VS", "zoug": "ZG",
    # Italian
    "argovia": "AG", "basilea campagna": "BL", "basilea città": "BS", "friborgo": "FR",
    "ginevra": "GE", "glarona": "GL", "grigioni": "GR", "lucerna": "LU",
    "san gallo": "SG", "sciaffusa": "SH", "soletta": "SO",
    "turgovia": "TG", "ticino": "TI", "vallese": "VS", "zugo": "ZG", "zurigo": "ZH",
}


def normalize_canton(value: str) -> Optional[str]:
    """
    Return the two-letter abbreviation of a Swiss canton, or None.

    Accepts abbreviations in any case ("zh"), canton names in German, French
    or Italian, optionally prefixed with "Kanton" / "Canton".
    """
    if not value:
        return None
    cleaned = re.sub(r"^(?:kanton|canton|cantone)\s+", "", value.strip().lower()).strip(" .,()")
    if cleaned.upper() in SWISS_CANTONS:
        return cleaned.upper()
    return CANTON_NAMES.get(cleaned)


# --------------------------------------------------------------
# SKILLS
# --------------------------------------------------------------
# Vocabulary recognized anywhere in the text. Ambiguous everyday words
# ("go", "excel" as a verb, ...) are left out.
KNOWN_SKILLS = [
    "Python", "Java", "JavaScript", "TypeScript", "C#", "C++", "Kotlin", "Swift",
    "Scala", "Rust", "Golang", "PHP", "Ruby", "SQL", "PostgreSQL", "MySQL", "MongoDB",
    "Redis", "Elasticsearch", "Kafka", "Spark", "Hadoop", "Airflow", "dbt",
    "React", "Angular", "Vue.js", "Node.js", "Next.js", "Django", "Flask", "FastAPI",
    "Spring Boot", ".NET", "GraphQL", "REST API", "HTML", "CSS", "Tailwind",
    "Docker", "Kubernetes", "Terraform", "Ansible", "Jenkins", "GitLab CI",
    "GitHub Actions", "AWS", "Azure", "GCP", "Linux", "Git",
    "Pandas", "NumPy", "scikit-learn", "TensorFlow", "PyTorch", "Machine Learning",
    "Data Analysis", "Power BI", "Tableau", "SAP", "Salesforce", "Microsoft Excel",
    "MS Office", "Jira", "Confluence", "Scrum", "Kanban", "Agile", "ITIL", "Prince2",
    "Project Management", "Figma", "Photoshop", "AutoCAD",
]


def skill_pattern(skill: str) -> re.Pattern:
    """Case-insensitive pattern matching `skill` as a whole token (handles C#, .NET, Node.js)."""
    return re.compile(rf"(?<![\w.+#-]){re.escape(skill)}(?![\w+#-]|\.\w)", re.IGNORECASE)


def dedupe_case_insensitive(items: List[str]) -> List[str]:
    """Strip items and drop case-insensitive duplicates, keeping first-seen order."""
    seen = set()
    unique_items = []
    for item in items:
        key = item.strip().lower()
        if key and key not in seen:
            seen.add(key)
            unique_items.append(item.strip())
    return unique_items
