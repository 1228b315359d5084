"""
Placeholder text for ``lorem`` nodes.

``lorem``, ``lorem10``, ``lorem5-15`` and ``loremru20`` turn into a
paragraph of random dummy words. A language suffix picks the word bank
(latin, ru, sp); the numbers give the word count or its range.
"""

import math
import random
import re

from .abbreviation import AbbreviationNode
from .transforms import resolve_implicit_tag


# ── Word banks ──────────────────────────────────────────────────────────────

LATIN = {
    "common": ["lorem", "ipsum", "dolor", "sit", "amet", "consectetur", "adipisicing", "elit"],
    "words": ["exercitationem", "perferendis", "perspiciatis", "laborum", "eveniet",
        "sunt", "iure", "nam", "nobis", "eum", "cum", "officiis", "excepturi",
        "odio", "consectetur", "quasi", "aut", "quisquam", "vel", "eligendi",
        "itaque", "non", "odit", "tempore", "quaerat", "dignissimos",
        "facilis", "neque", "nihil", "expedita", "vitae", "vero", "ipsum",
        "nisi", "animi", "cumque", "pariatur", "velit", "modi", "natus",
        "iusto", "eaque", "sequi", "illo", "sed", "ex", "et", "voluptatibus",
        "tempora", "veritatis", "ratione", "assumenda", "incidunt", "nostrum",
        "placeat", "aliquid", "fuga", "provident", "praesentium", "rem",
        "necessitatibus", "suscipit", "adipisci", "quidem", "possimus",
        "voluptas", "debitis", "sint", "accusantium", "unde", "sapiente",
        "voluptate", "qui", "aspernatur", "laudantium", "soluta", "amet",
        "quo", "aliquam", "saepe", "culpa", "libero", "ipsa", "dicta",
        "reiciendis", "nesciunt", "doloribus", "autem", "impedit", "minima",
        "maiores", "repudiandae", "ipsam", "obcaecati", "ullam", "enim",
        "totam", "delectus", "ducimus", "quis", "voluptates", "dolores",
        "molestiae", "harum", "dolorem", "quia", "voluptatem", "molestias",
        "magni", "distinctio", "omnis", "illum", "dolorum", "voluptatum", "ea",
        "quas", "quam", "corporis", "quae", "blanditiis", "atque", "deserunt",
        "laboriosam", "earum", "consequuntur", "hic", "cupiditate",
        "quibusdam", "accusamus", "ut", "rerum", "error", "minus", "eius",
        "ab", "ad", "nemo", "fugit", "officia", "at", "in", "id", "quos",
        "reprehenderit", "numquam", "iste", "fugiat", "sit", "inventore",
        "beatae", "repellendus", "magnam", "recusandae", "quod", "explicabo",
        "doloremque", "aperiam", "consequatur", "asperiores", "commodi",
        "optio", "dolor", "labore", "temporibus", "repellat", "veniam",
        "architecto", "est", "esse", "mollitia", "nulla", "a", "similique",
        "eos", "alias", "dolore", "tenetur", "deleniti", "porro", "facere",
        "maxime", "corrupti"],
}

RU = {
    "common": ["далеко-далеко", "за", "словесными", "горами", "в стране", "гласных", "и согласных", "живут", "рыбные", "тексты"],
    "words": ["вдали", "от всех", "они", "буквенных", "домах", "на берегу", "семантика",
        "большого", "языкового", "океана", "маленький", "ручеек", "даль",
        "журчит", "по всей", "обеспечивает", "ее","всеми", "необходимыми",
        "правилами", "эта", "парадигматическая", "страна", "которой", "жаренные",
        "предложения", "залетают", "прямо", "рот", "даже", "всемогущая",
        "пунктуация", "не", "имеет", "власти", "над", "рыбными", "текстами",
        "ведущими", "безорфографичный", "образ", "жизни", "однажды", "одна",
        "маленькая", "строчка","рыбного", "текста", "имени", "lorem", "ipsum",
        "решила", "выйти", "большой", "мир", "грамматики", "великий", "оксмокс",
        "предупреждал", "о", "злых", "запятых", "диких", "знаках", "вопроса",
        "коварных", "точках", "запятой", "но", "текст", "дал", "сбить",
        "себя", "толку", "он", "собрал", "семь", "своих", "заглавных", "букв",
        "подпоясал", "инициал", "за", "пояс", "пустился", "дорогу",
        "взобравшись", "первую", "вершину", "курсивных", "гор", "бросил",
        "последний", "взгляд", "назад", "силуэт", "своего", "родного", "города",
        "буквоград", "заголовок", "деревни", "алфавит", "подзаголовок", "своего",
        "переулка", "грустный", "реторический", "вопрос", "скатился", "его",
        "щеке", "продолжил", "свой", "путь", "дороге", "встретил", "рукопись",
        "она", "предупредила",  "моей", "все", "переписывается", "несколько",
        "раз", "единственное", "что", "меня", "осталось", "это", "приставка",
        "возвращайся", "ты", "лучше", "свою", "безопасную", "страну", "послушавшись",
        "рукописи", "наш", "продолжил", "свой", "путь", "вскоре", "ему",
        "повстречался", "коварный", "составитель", "рекламных", "текстов",
        "напоивший", "языком", "речью", "заманивший", "свое", "агентство",
        "которое", "использовало", "снова", "снова", "своих", "проектах",
        "если", "переписали", "то", "живет", "там", "до", "сих", "пор"],
}

SP = {
    "common": ["mujer", "uno", "dolor", "más", "de", "poder", "mismo", "si"],
    "words": ["ejercicio", "preferencia", "perspicacia", "laboral", "paño",
        "suntuoso", "molde", "namibia", "planeador", "mirar", "demás", "oficinista", "excepción",
        "odio", "consecuencia", "casi", "auto", "chicharra", "velo", "elixir",
        "ataque", "no", "odio", "temporal", "cuórum", "dignísimo",
        "facilismo", "letra", "nihilista", "expedición", "alma", "alveolar", "aparte",
        "león", "animal", "como", "paria", "belleza", "modo", "natividad",
        "justo", "ataque", "séquito", "pillo", "sed", "ex", "y", "voluminoso",
        "temporalidad", "verdades", "racional", "asunción", "incidente", "marejada",
        "placenta", "amanecer", "fuga", "previsor", "presentación", "lejos",
        "necesariamente", "sospechoso", "adiposidad", "quindío", "pócima",
        "voluble", "débito", "sintió", "accesorio", "falda", "sapiencia",
        "volutas", "queso", "permacultura", "laudo", "soluciones", "entero",
        "pan", "litro", "tonelada", "culpa", "libertario", "mosca", "dictado",
        "reincidente", "nascimiento", "dolor", "escolar", "impedimento", "mínima",
        "mayores", "repugnante", "dulce", "obcecado", "montaña", "enigma",
        "total", "deletéreo", "décima", "cábala", "fotografía", "dolores",
        "molesto", "olvido", "paciencia", "resiliencia", "voluntad", "molestias",
        "magnífico", "distinción", "ovni", "marejada", "cerro", "torre", "y",
        "abogada", "manantial", "corporal", "agua", "crepúsculo", "ataque", "desierto",
        "laboriosamente", "angustia", "afortunado", "alma", "encefalograma",
        "materialidad", "cosas", "o", "renuncia", "error", "menos", "conejo",
        "abadía", "analfabeto", "remo", "fugacidad", "oficio", "en", "almácigo", "vos", "pan",
        "represión", "números", "triste", "refugiado", "trote", "inventor",
        "corchea", "repelente", "magma", "recusado", "patrón", "explícito",
        "paloma", "síndrome", "inmune", "autoinmune", "comodidad",
        "ley", "vietnamita", "demonio", "tasmania", "repeler", "apéndice",
        "arquitecto", "columna", "yugo", "computador", "mula", "a", "propósito",
        "fantasía", "alias", "rayo", "tenedor", "deleznable", "ventana", "cara",
        "anemia", "corrupto"],
}


VOCABULARIES = {"ru": RU, "sp": SP, "latin": LATIN}

LOREM_RE = re.compile(r"^lorem([a-z]*)(\d*)(-\d*)?$", re.IGNORECASE)


def lorem(node: AbbreviationNode, ancestors: list, config):
    """Replace a ``lorem*`` node with a paragraph of dummy text."""
    m = LOREM_RE.match(node.name) if node.name else None
    if not m:
        return

    db = VOCABULARIES.get(m.group(1), LATIN)
    min_count = max(1, int(m.group(2))) if m.group(2) else 30
    max_count = max(min_count, int(m.group(3)[1:] or 0)) if m.group(3) else min_count
    word_count = _rand(min_count, max_count + 1)

    repeat = node.repeat or find_repeater(ancestors)
    node.name = None
    node.attributes = None
    node.value = [paragraph(db, word_count, repeat is None or repeat.value == 0)]

    if node.repeat is not None and len(ancestors) > 1:
        resolve_implicit_tag(node, ancestors, config)


def paragraph(db: dict, word_count: int, start_with_common: bool) -> str:
    """Generate ``word_count`` words of text, split into sentences.

    Args:
        db: Word bank with "common" and "words" lists.
        word_count: Exact number of words to produce.
        start_with_common: Open with the bank's "Lorem ipsum..." sentence.
    """
    result = []
    total = 0

    if start_with_common and db.get("common"):
        words = db["common"][:word_count]
        total += len(words)
        result.append(_sentence(_insert_commas(words), "."))

    while total < word_count:
        words = _sample(db["words"], min(_rand(2, 30), word_count - total))
        total += len(words)
        result.append(_sentence(_insert_commas(words)))

    return " ".join(result)


def find_repeater(ancestors: list):
    for elem in reversed(ancestors):
        if isinstance(elem, AbbreviationNode) and elem.repeat is not None:
            return elem.repeat
    return None


def _rand(start: int, end: int) -> int:
    """Random integer in ``[start, end)``."""
    return math.floor(random.random() * (end - start) + start)


def _sample(words: list, count: int) -> list:
    iterations = min(len(words), count)
    result = []
    while len(result) < iterations:
        word = words[_rand(0, len(words))]
        if word not in result:
            result.append(word)
    return result


def _choice(value):
    return value[_rand(0, len(value) - 1)]


def _sentence(words: list, end: str = "") -> str:
    if words:
        words = [_capitalize(words[0])] + words[1:]
    # more dots than question marks
    return " ".join(words) + (end or _choice("?!..."))


def _capitalize(word: str) -> str:
    return word[0].upper() + word[1:]


def _insert_commas(words: list) -> list:
    if len(words) < 2:
        return words

    words = list(words)
    size = len(words)
    if 3 < size <= 6:
        total_commas = _rand(0, 1)
    elif 6 < size <= 12:
        total_commas = _rand(0, 2)
    else:
        total_commas = _rand(1, 4)

    for _ in range(total_commas):
        pos = _rand(0, size - 2)
        if not words[pos].endswith(","):
            words[pos] += ","
    return words
