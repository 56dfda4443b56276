"""
Word lists used by the vocabulary, sentiment, intimacy and style metrics.

Chats are mostly Polish with English mixed in, so every list covers both
languages. Diacritic-free spellings are listed where they are common in
casual typing.
"""

import re
import unicodedata
from typing import Optional

import emoji

# Short, common words filtered from top-words and phrase analysis
STOPWORDS = frozenset([
    # English
    "i", "me", "my", "myself", "we", "our", "ours", "ourselves", "you", "your", "yours",
    "yourself", "yourselves", "he", "him", "his", "himself", "she", "her", "hers",
    "herself", "it", "its", "itself", "they", "them", "their", "theirs", "themselves",
    "what", "which", "who", "whom", "this", "that", "these", "those", "am", "is", "are",
    "was", "were", "be", "been", "being", "have", "has", "had", "having", "do", "does",
    "did", "doing", "a", "an", "the", "and", "but", "if", "or", "because", "as", "until",
    "while", "of", "at", "by", "for", "with", "about", "against", "between", "through",
    "during", "before", "after", "above", "below", "to", "from", "up", "down", "in",
    "out", "on", "off", "over", "under", "again", "further", "then", "once", "here",
    "there", "when", "where", "why", "how", "all", "both", "each", "few", "more", "most",
    "other", "some", "such", "no", "nor", "not", "only", "own", "same", "so", "than",
    "too", "very", "s", "t", "can", "will", "just", "don", "should", "now", "d", "ll",
    "m", "o", "re", "ve", "y", "ain", "aren", "couldn", "didn", "doesn", "hadn", "hasn",
    "haven", "isn", "ma", "mightn", "mustn", "needn", "shan", "shouldn", "wasn",
    "weren", "won", "wouldn", "ok", "yes", "yeah", "yep", "nah", "nope", "oh",
    "ah", "um", "uh", "like", "lol", "haha", "hahaha", "xd", "xdd",
    # Polish
    "w", "z", "na", "do", "to", "je", "się", "nie", "że", "co", "tak", "za", "ale",
    "od", "po", "jak", "już", "mi", "ty", "ja", "ten", "ta", "te", "go", "mu", "czy",
    "jest", "są", "był", "była", "było", "być", "mam", "masz", "si", "tu",
    "tam", "też", "tym", "tego", "tej", "tych", "bo", "ze", "sobie", "tylko", "jeszcze",
    "może", "trzeba", "bardzo", "teraz", "kiedy", "gdzie", "dlaczego", "bez", "przy",
    "nad", "pod", "przed", "przez", "dla", "ani", "albo", "u", "ku", "aż",
    "juz", "sie", "moze", "tez", "wiec", "czyli", "dobra",
])

POSITIVE_WORDS = frozenset([
    # Polish: affection
    "kocham", "kochanie", "kochany", "kochana", "kochani", "uwielbiam", "lubię",
    "lubie", "tęsknię", "tesknie", "przytulam", "buziaki", "buziak", "całuski",
    "caluski", "serce", "serduszko", "skarbie", "kotku", "misiu",
    # Polish: praise
    "cudownie", "cudowny", "cudowna", "cudowne", "świetnie", "świetny", "świetna",
    "swietnie", "super", "mega", "ekstra", "pięknie", "piękny", "piękna", "pieknie",
    "wspaniale", "wspaniały", "wspaniała", "genialnie", "genialny", "genialna",
    "fantastycznie", "fantastyczny", "niesamowicie", "niesamowite", "idealnie",
    "idealny", "idealna", "ślicznie", "śliczny", "śliczna", "rewelacja",
    # Polish: states
    "dobrze", "dobry", "dobre", "fajnie", "fajny", "fajna", "fajne", "miło", "milo",
    "miły", "miła", "przyjemnie", "najlepszy", "najlepsza", "najlepiej",
    "szczęśliwy", "szczęśliwa", "szczęście", "szczesliwy", "szczesliwa",
    "zadowolony", "zadowolona", "wdzięczny", "wdzięczna", "dumny", "dumna",
    "radość", "radosny", "spokojnie", "uroczy", "urocza",
    # Polish: reactions and slang
    "brawo", "gratulacje", "gratki", "dziękuję", "dzięki", "dzieki", "dziekuje",
    "hurra", "wreszcie", "nareszcie", "udało", "sukces", "zajebiście", "zajebisty",
    "spoko", "kozak", "petarda", "sztos", "git", "gitara", "niezły", "niezła",
    "cieszę", "ciesze", "zachwycony", "zachwycona",
    # English
    "love", "adore", "cherish", "miss", "hug", "kiss", "darling", "sweetheart",
    "babe", "honey", "amazing", "awesome", "great", "perfect", "beautiful",
    "wonderful", "lovely", "excellent", "brilliant", "incredible", "fantastic",
    "happy", "glad", "grateful", "thankful", "proud", "excited", "thrilled",
    "delighted", "pleased", "blessed", "lucky", "hopeful", "calm", "thank",
    "thanks", "congrats", "congratulations", "yay", "finally", "success",
    "fire", "lit", "dope", "epic", "iconic", "legendary", "nice", "cool",
    "sweet", "best", "good",
])

NEGATIVE_WORDS = frozenset([
    # Polish: hatred, contempt
    "nienawidzę", "nienawidze", "nienawiść", "nienawisc", "pogarda", "odraza",
    "wstręt", "obrzydliwe", "obrzydliwy",
    # Polish: intensifiers
    "okropnie", "okropny", "okropna", "strasznie", "straszny", "straszna",
    "beznadziejnie", "beznadziejny", "beznadziejna", "fatalnie", "fatalny",
    "tragicznie", "tragiczny", "żałosne", "zalosne", "kiepski", "kiepsko",
    "słaby", "słabo", "slabo",
    # Polish: anger
    "wkurza", "wkurzony", "wkurzona", "denerwuje", "zdenerwowany", "zdenerwowana",
    "wściekły", "wściekła", "wsciekly", "zły", "zła", "złe", "złość", "zlosc",
    "gniew",
    # Polish: sadness
    "smutno", "smutny", "smutna", "smutek", "przykro", "boli", "ból", "bol",
    "cierpię", "cierpie", "cierpienie", "martwię", "martwie", "płaczę", "placze",
    "samotny", "samotna", "samotność", "nieszczęśliwy", "nieszczęśliwa",
    # Polish: disappointment, fear, guilt
    "rozczarowany", "rozczarowana", "rozczarowanie", "zawiedziony", "zawiedziona",
    "załamany", "załamana", "porażka", "porazka", "katastrofa", "koszmar",
    "dramat", "boję", "boje", "strach", "lęk", "panika", "stres", "wstyd",
    "żal", "zal",
    # Polish: social, profanity
    "toksyczny", "toksyczna", "kłamstwo", "klamstwo", "kłamiesz", "klamiesz",
    "zdrada", "oszust", "ignorujesz", "olewasz", "cholera", "kurwa", "kurde",
    # English
    "hate", "angry", "furious", "annoyed", "annoying", "mad", "upset", "sad",
    "unhappy", "depressed", "lonely", "hurt", "pain", "crying", "cry",
    "disappointed", "terrible", "awful", "horrible", "worst", "bad", "sucks",
    "stupid", "disgusting", "afraid", "scared", "worried", "anxious", "stressed",
    "ashamed", "guilty", "toxic", "liar", "lying", "betrayed", "miserable",
    "hopeless", "nightmare", "fail", "failed", "failure", "boring",
])

# Negation particles
NEGATIONS_PL = frozenset(["nie", "bez", "ani"])
NEGATIONS_EN = frozenset([
    "not", "dont", "cant", "wont", "isnt", "arent", "wasnt", "werent", "hasnt",
    "havent", "doesnt", "didnt", "couldnt", "wouldnt", "shouldnt", "never",
])
NEGATIONS_ALL = NEGATIONS_PL | NEGATIONS_EN
NEGATION_WINDOW = 3

# Words that reliably mark a message as English
ENGLISH_MARKER_RE = re.compile(
    r"\b(the|this|that|with|from|they|them|their|you're|i'm|i'll|i've|we're|"
    r"it's|that's|what's|there's|here's|she's|he's)\b",
    re.IGNORECASE,
)

# High-signal emotional words for intimacy progression
EMOTIONAL_WORDS = frozenset([
    # Polish
    "kocham", "kochanie", "kochana", "kochany", "tęsknię", "tęsknie", "tęsknota",
    "cudownie", "cudowny", "cudowna", "wspaniale", "szczęście", "szczescie",
    "pięknie", "pieknie", "piękna", "przepraszam", "przytulam", "buziaki",
    "kochać", "skarbie", "kochasz", "serce", "serduszko", "ślicznie", "slicznie",
    "uwielbiam", "obiecuję", "obiecuje", "nienawidzę", "nienawidze", "złość",
    "wściekły", "wkurzony", "wkurzona", "boli", "płaczę", "placze", "smutno",
    "smutna", "smutny", "żal", "samotna", "samotny", "strach", "boję", "boje",
    "rozczarowana", "rozczarowany", "zdrada", "kłamiesz", "ból", "cierpię",
    # English
    "love", "adore", "miss", "missing", "beautiful", "wonderful", "amazing",
    "gorgeous", "grateful", "appreciate", "cherish", "sweetheart", "darling",
    "honey", "babe", "baby", "perfect", "blessed", "proud", "forever", "always",
    "hate", "angry", "furious", "hurt", "crying", "depressed", "heartbroken",
    "betrayed", "jealous", "lonely", "afraid", "scared", "disappointed",
    "miserable", "hopeless", "desperate", "broken", "nightmare", "toxic",
])

# Function-word categories for language style matching
FUNCTION_WORD_CATEGORIES = {
    "articles": frozenset([
        "a", "an", "the",
        "ten", "ta", "to", "tej", "tego", "temu", "tym", "te", "tych",
    ]),
    "prepositions": frozenset([
        "w", "na", "do", "za", "z", "ze", "od", "po", "przy", "nad", "pod",
        "przed", "między", "przez", "dla", "bez", "wśród", "wsrod", "obok",
        "koło", "kolo", "wokół", "wokol", "wobec", "poza", "mimo",
        "in", "on", "at", "for", "with", "to", "from", "by", "of",
        "about", "into", "through", "during", "before", "after",
        "above", "below", "between", "under", "over", "near",
    ]),
    "auxiliary_verbs": frozenset([
        "jest", "są", "był", "była", "było", "byli", "były",
        "będzie", "bedzie", "będą", "beda", "jestem", "jesteś", "jestes",
        "jesteśmy", "jestesmy", "byłem", "byłam", "bylam", "bylem",
        "można", "mozna", "trzeba", "powinno", "może", "moze",
        "is", "am", "are", "was", "were", "be", "been", "being",
        "have", "has", "had", "do", "does", "did",
        "will", "would", "shall", "should", "can", "could",
        "may", "might", "must",
    ]),
    "conjunctions": frozenset([
        "i", "ale", "lub", "albo", "bo", "ponieważ", "poniewaz",
        "więc", "wiec", "dlatego", "jednak", "natomiast", "chociaż", "chociaz",
        "że", "ze", "żeby", "zeby", "czy", "gdyby", "gdy", "kiedy",
        "and", "but", "or", "because", "so", "yet", "nor",
        "although", "though", "while", "since", "unless", "until",
        "if", "when", "where", "that", "which", "who",
    ]),
    "negations": frozenset([
        "nie", "nigdy", "żaden", "zaden", "żadna", "zadna", "żadne", "zadne",
        "nic", "nikt", "nigdzie", "ani",
        "not", "no", "never", "none", "nothing", "nobody", "nowhere", "neither",
    ]),
    "quantifiers": frozenset([
        "wszystko", "wszystkie", "wszyscy", "każdy", "kazdy", "każda", "kazda",
        "kilka", "kilku", "dużo", "duzo", "mało", "malo", "trochę", "troche",
        "wiele", "wielu", "parę", "pare", "niektóre", "niektore",
        "all", "some", "many", "few", "every", "each", "much",
        "several", "any", "most", "both", "enough", "more", "less",
    ]),
    "personal_pronouns": frozenset([
        "ja", "mnie", "mi", "mną", "mna",
        "ty", "ciebie", "ci", "cię", "cie", "tobą", "toba",
        "on", "go", "mu", "nim", "niego", "niej", "nią", "nia",
        "ona", "jej",
        "my", "nas", "nam", "nami",
        "wy", "was", "wam", "wami",
        "oni", "one", "ich", "im", "nimi",
        "i", "me", "you", "he", "him", "she", "her",
        "we", "us", "they", "them", "it",
    ]),
    "impersonal_pronouns": frozenset([
        "to", "tamto", "coś", "cos", "ktoś", "ktos",
        "czegoś", "czegos", "kogoś", "kogos", "komuś", "komus",
        "sobie", "siebie", "się", "sie",
        "this", "that", "these", "those",
        "something", "someone", "anything", "anyone",
        "everything", "everyone", "itself", "themselves",
    ]),
    "adverbs": frozenset([
        "bardzo", "naprawdę", "naprawde", "zawsze", "właśnie", "wlasnie",
        "już", "juz", "jeszcze", "tylko", "też", "tez", "również", "rowniez",
        "chyba", "raczej", "pewnie", "może", "moze", "jakoś", "jakos",
        "dość", "dosc", "dosyć", "dosyc", "całkiem", "calkiem",
        "very", "really", "always", "just", "still", "already",
        "also", "too", "even", "quite", "pretty", "almost",
        "often", "sometimes", "probably", "maybe", "perhaps",
    ]),
}

# First-person singular, all Polish cases and possessives ("sobie" reads as self-reference)
I_WORDS = frozenset([
    "ja", "mnie", "mi", "mną", "mna",
    "mój", "moj", "moja", "moje", "moich", "moim", "moimi", "mojej", "mojemu", "moją",
    "sobie", "siebie",
    "i", "me", "my", "mine", "myself",
])

# "my" is also Polish "we"; I_WORDS is checked first
WE_WORDS = frozenset([
    "my", "nas", "nam", "nami",
    "nasz", "nasza", "nasze", "naszego", "naszej", "naszemu",
    "naszym", "naszą", "naszych", "naszymi",
    "we", "us", "our", "ours", "ourselves",
])

YOU_WORDS = frozenset([
    "ty", "ciebie", "cię", "cie", "ci", "tobie", "tobą", "toba",
    "twój", "twoj", "twoja", "twoje", "twojego", "twojej", "twojemu",
    "twoim", "twoją", "twoich", "twoimi",
    "wy", "was", "wam", "wami",
    "wasz", "wasza", "wasze", "waszego", "waszej", "waszemu",
    "waszym", "waszą", "waszych", "waszymi",
    "you", "your", "yours", "yourself", "yourselves",
])

_CONTRACTION_RE = re.compile(
    r"\b(don|can|won|isn|aren|wasn|weren|hasn|haven|doesn|didn|couldn|wouldn|shouldn)'t\b"
)
_SENTIMENT_SPLIT_RE = re.compile(r"[\s.,!?;:()\[\]{}\"'\-/\\<>@#$%^&*+=|~`]+")
_REPEATED_RE = re.compile(r"(.)\1{2,}")


def strip_diacritics(word: str) -> str:
    """Fold Polish diacritics to ASCII (ł is not decomposable, so map it)."""
    word = word.replace("ł", "l").replace("Ł", "L")
    decomposed = unicodedata.normalize("NFKD", word)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


_POSITIVE_FOLDED = frozenset(strip_diacritics(w) for w in POSITIVE_WORDS)
_NEGATIVE_FOLDED = frozenset(strip_diacritics(w) for w in NEGATIVE_WORDS)


def sentiment_tokens(text: str) -> list:
    """Lower-case tokens for sentiment matching (stopwords are kept)."""
    lowered = _CONTRACTION_RE.sub(r"\1t", text.lower())
    lowered = emoji.replace_emoji(lowered, replace="")
    return [t for t in _SENTIMENT_SPLIT_RE.split(lowered) if len(t) >= 2]


def polarity(token: str) -> Optional[str]:
    """Return 'positive', 'negative' or None for a single token."""
    for candidate in (token, _REPEATED_RE.sub(r"\1\1", token)):
        if candidate in POSITIVE_WORDS:
            return "positive"
        if candidate in NEGATIVE_WORDS:
            return "negative"
    folded = strip_diacritics(token)
    if folded in _POSITIVE_FOLDED:
        return "positive"
    if folded in _NEGATIVE_FOLDED:
        return "negative"
    return None


def negation_set(text: str) -> frozenset:
    """Polish negators always apply; English ones only for English-looking text."""
    return NEGATIONS_ALL if ENGLISH_MARKER_RE.search(text) else NEGATIONS_PL


def style_tokens(text: str) -> list:
    """Lower-case tokens for function-word counting (single letters are words)."""
    lowered = emoji.replace_emoji(text.lower(), replace="")
    return [t for t in _SENTIMENT_SPLIT_RE.split(lowered) if t]
