"""
Convert arbitrarily large decimal numbers to words.

Output formats (``mode``):
    words          "one hundred twenty-three point four five"
    check_writing  "one hundred twenty-three and 45/100 dollars"
    currency       "one hundred twenty-three dollars and forty-five cents"
    currency_vat   currency wording of principal + VAT, followed by a clause
                   spelling out the VAT amount

Numbers are handled as digit strings end to end (see `number_parsing`), so a
300-digit integer converts as exactly as a 3-digit one. English and Russian
name scales up to novemnonagintillion (10^300); the long-scale European
locales stop at the decillion/decilliard range. Larger groups are still
spelled out, just without a scale word.

Wording is produced by a locale processor: en, ru, de, es, fr, it, pl, lv.
Russian, Polish and Latvian decline nouns by the last digits of the amount.
Any other language tag falls back to English wording.
"""

from __future__ import annotations

import logging
import math
from decimal import ROUND_HALF_UP, Decimal, localcontext
from typing import Any

from .models import Currency, NumberToWordsOptions, NumberToWordsResult, TextCase
from .number_parsing import ParsedNumber, parse_decimal
from .text_case import convert_case

logger = logging.getLogger(__name__)

_CENT = Decimal("0.01")


# ─── Locale Processors ───────────────────────────────────────────────


class LocaleWords:
    """Number wording for one language.

    Subclasses provide the word tables; integer grouping is shared. Groups
    of three digits are spelled by `group_words`, so a locale only overrides
    that hook when its thousands or millions read differently.
    """

    language = ""
    scales: tuple[str, ...] = ()
    digits: tuple[str, ...] = ()
    zero_word = ""
    minus_word = ""
    and_word = ""
    point_word = ""
    # Write the thousands group and the units group as one word (de, it)
    compound_below_million = False

    # name, plural, fractional, fractional plural
    currencies: dict[str, tuple[str, str, str, str]] = {}

    def hundreds(self, num: int, feminine: bool = False) -> str:
        raise NotImplementedError

    def scale_word(self, scale_index: int, group: int) -> str:
        if 0 < scale_index < len(self.scales):
            return self.scales[scale_index]
        return ""

    def group_words(self, group: int, scale_index: int) -> str:
        words = self.hundreds(group, feminine=self.feminine_group(scale_index))
        scale = self.scale_word(scale_index, group)
        return f"{words} {scale}" if scale else words

    def integer_to_words(self, integer: str) -> str:
        """Spell out a non-negative integer given as a digit string."""
        integer = integer.lstrip("0")
        if not integer:
            return self.zero_word

        groups = [integer[max(0, end - 3) : end] for end in range(len(integer), 0, -3)]
        text = ""
        previous = -1

        for scale_index in range(len(groups) - 1, -1, -1):
            group = int(groups[scale_index])
            if group == 0:
                continue
            if text:
                glued = self.compound_below_million and previous == 1 and scale_index == 0
                text += "" if glued else " "
            text += self.group_words(group, scale_index)
            previous = scale_index

        return text

    def feminine_group(self, scale_index: int) -> bool:
        return False

    def digit_words(self, digits: str) -> str:
        return " ".join(self.digits[int(d)] for d in digits)

    def currency_name(self, currency: Currency, amount: int) -> str:
        name, plural, _, _ = self.currencies[currency]
        return name if amount == 1 else plural

    def fractional_name(self, currency: Currency, amount: int) -> str:
        _, _, fractional, fractional_plural = self.currencies[currency]
        return fractional if amount == 1 else fractional_plural

    def fraction_to_words(self, currency: Currency, cents: int) -> str:
        return self.hundreds(cents) if cents else self.zero_word

    def check_writing_suffix(self, currency: Currency, integer: int, cents: str) -> str:
        return f"{self.and_word} {cents}/100 {self.currency_name(currency, integer)}"

    def vat_phrase(self, rate: str, amount_words: str) -> str:
        raise NotImplementedError


class EnglishWords(LocaleWords):
    language = "en"
    scales = (
        "", "thousand", "million", "billion", "trillion", "quadrillion",
        "quintillion", "sextillion", "septillion", "octillion", "nonillion",
        "decillion", "undecillion", "duodecillion", "tredecillion",
        "quattuordecillion", "quindecillion", "sexdecillion", "septendecillion",
        "octodecillion", "novemdecillion", "vigintillion", "unvigintillion",
        "duovigintillion", "trevigintillion", "quattuorvigintillion",
        "quinvigintillion", "sexvigintillion", "septenvigintillion",
        "octovigintillion", "novemvigintillion", "trigintillion",
        "untrigintillion", "duotrigintillion", "tretrigintillion",
        "quattuortrigintillion", "quintrigintillion", "sextrigintillion",
        "septentrigintillion", "octotrigintillion", "novemtrigintillion",
        "quadragintillion", "unquadragintillion", "duoquadragintillion",
        "trequadragintillion", "quattuorquadragintillion", "quinquadragintillion",
        "sexquadragintillion", "septenquadragintillion", "octoquadragintillion",
        "novemquadragintillion", "quinquagintillion", "unquinquagintillion",
        "duoquinquagintillion", "trequinquagintillion", "quattuorquinquagintillion",
        "quinquinquagintillion", "sexquinquagintillion", "septenquinquagintillion",
        "octoquinquagintillion", "novemquinquagintillion", "sexagintillion",
        "unsexagintillion", "duosexagintillion", "tresexagintillion",
        "quattuorsexagintillion", "quinsexagintillion", "sexsexagintillion",
        "septensexagintillion", "octosexagintillion", "novemsexagintillion",
        "septuagintillion", "unseptuagintillion", "duoseptuagintillion",
        "treseptuagintillion", "quattuorseptuagintillion", "quinseptuagintillion",
        "sexseptuagintillion", "septenseptuagintillion", "octoseptuagintillion",
        "novemseptuagintillion", "octogintillion", "unoctogintillion",
        "duooctogintillion", "treoctogintillion", "quattuoroctogintillion",
        "quinoctogintillion", "sexoctogintillion", "septenoctogintillion",
        "octooctogintillion", "novemoctogintillion", "nonagintillion",
        "unnonagintillion", "duononagintillion", "trenonagintillion",
        "quattuornonagintillion", "quinnonagintillion", "sexnonagintillion",
        "septennonagintillion", "octononagintillion", "novemnonagintillion",
    )
    digits = ("zero", "one", "two", "three", "four", "five", "six", "seven", "eight", "nine")
    teens = (
        "ten", "eleven", "twelve", "thirteen", "fourteen",
        "fifteen", "sixteen", "seventeen", "eighteen", "nineteen",
    )
    tens = ("", "", "twenty", "thirty", "forty", "fifty", "sixty", "seventy", "eighty", "ninety")
    zero_word = "zero"
    minus_word = "minus"
    and_word = "and"
    point_word = "point"

    currencies = {
        "USD": ("dollar", "dollars", "cent", "cents"),
        "GBP": ("pound", "pounds", "penny", "pence"),
        "EUR": ("euro", "euros", "cent", "cents"),
        "PLN": ("zloty", "zlotys", "grosz", "groszy"),
        "RUB": ("ruble", "rubles", "kopeck", "kopecks"),
    }

    def hundreds(self, num: int, feminine: bool = False) -> str:
        parts: list[str] = []
        hundreds, remainder = divmod(num, 100)

        if hundreds:
            parts.append(f"{self.digits[hundreds]} hundred")

        if 10 <= remainder < 20:
            parts.append(self.teens[remainder - 10])
        elif remainder:
            tens, ones = divmod(remainder, 10)
            if tens and ones:
                parts.append(f"{self.tens[tens]}-{self.digits[ones]}")
            elif tens:
                parts.append(self.tens[tens])
            else:
                parts.append(self.digits[ones])

        return " ".join(parts)

    def vat_phrase(self, rate: str, amount_words: str) -> str:
        return f", including vat ({rate}%) in the amount of {amount_words}"


class RussianWords(LocaleWords):
    language = "ru"
    digits = ("ноль", "один", "два", "три", "четыре", "пять", "шесть", "семь", "восемь", "девять")
    digits_feminine = ("ноль", "одна", "две", "три", "четыре", "пять", "шесть", "семь", "восемь", "девять")
    teens = (
        "десять", "одиннадцать", "двенадцать", "тринадцать", "четырнадцать",
        "пятнадцать", "шестнадцать", "семнадцать", "восемнадцать", "девятнадцать",
    )
    tens = (
        "", "", "двадцать", "тридцать", "сорок",
        "пятьдесят", "шестьдесят", "семьдесят", "восемьдесят", "девяносто",
    )
    hundred_words = (
        "", "сто", "двести", "триста", "четыреста",
        "пятьсот", "шестьсот", "семьсот", "восемьсот", "девятьсот",
    )
    # Nominative singular; genitive forms are derived below except for thousands
    scales = (
        "", "тысяча", "миллион", "миллиард", "триллион", "квадриллион",
        "квинтиллион", "секстиллион", "септиллион", "октиллион", "нониллион",
        "дециллион", "ундециллион", "дуодециллион", "тредециллион",
        "кваттордециллион", "квиндециллион", "сексдециллион", "септендециллион",
        "октодециллион", "новемдециллион", "вигинтиллион", "унвигинтиллион",
        "дуовигинтиллион", "тревигинтиллион", "кватторвигинтиллион",
        "квинвигинтиллион", "сексвигинтиллион", "септенвигинтиллион",
        "октовигинтиллион", "новемвигинтиллион", "тригинтиллион",
        "унтригинтиллион", "дуотригинтиллион", "третригинтиллион",
        "кваттортригинтиллион", "квинтригинтиллион", "секстригинтиллион",
        "септентригинтиллион", "октотригинтиллион", "новемтригинтиллион",
        "квадрагинтиллион", "унквадрагинтиллион", "дуоквадрагинтиллион",
        "треквадрагинтиллион", "кватторквадрагинтиллион", "квинквадрагинтиллион",
        "сексквадрагинтиллион", "септенквадрагинтиллион", "октоквадрагинтиллион",
        "новемквадрагинтиллион", "квинквагинтиллион", "унквинквагинтиллион",
        "дуоквинквагинтиллион", "треквинквагинтиллион", "кватторквинквагинтиллион",
        "квинквинквагинтиллион", "сексквинквагинтиллион", "септенквинквагинтиллион",
        "октоквинквагинтиллион", "новемквинквагинтиллион", "сексагинтиллион",
        "унсексагинтиллион", "дуосексагинтиллион", "трисексагинтиллион",
        "кватторсексагинтиллион", "квинтсексагинтиллион", "секстсексагинтиллион",
        "септенсексагинтиллион", "октосексагинтиллион", "новемсексагинтиллион",
        "сепсептагинтиллион", "унсепсептагинтиллион", "дуосепсептагинтиллион",
        "трисепсептагинтиллион", "кватторсепсептагинтиллион", "квинтсепсептагинтиллион",
        "секстсепсептагинтиллион", "септенсепсептагинтиллион", "октосепсептагинтиллион",
        "новемсепсептагинтиллион", "октогинтиллион", "уноктогинтиллион",
        "дуоктогинтиллион", "триоктогинтиллион", "кваттороктогинтиллион",
        "квинтоктогинтиллион", "сексоктогинтиллион", "септентоктогинтиллион",
        "октоктогинтиллион", "новемоктогинтиллион", "нонагинтиллион",
        "уннонагинтиллион", "дуононагинтиллион", "тринонагинтиллион",
        "кватторнонагинтиллион", "квинтнонагинтиллион", "секснонагинтиллион",
        "септеннонагинтиллион", "октононагинтиллион", "новемнонагинтиллион",
    )
    zero_word = "ноль"
    minus_word = "минус"
    and_word = "и"
    point_word = "запятая"

    # (one, few, many) forms for the main and fractional unit; fractional gender
    currencies: dict[str, tuple[tuple[str, str, str], tuple[str, str, str], bool]] = {
        "USD": (("доллар сша", "доллара сша", "долларов сша"), ("цент", "цента", "центов"), False),
        "GBP": (
            ("фунт стерлингов", "фунта стерлингов", "фунтов стерлингов"),
            ("пенс", "пенса", "пенсов"),
            False,
        ),
        "EUR": (("евро", "евро", "евро"), ("цент", "цента", "центов"), False),
        "PLN": (("злотый", "злотых", "злотых"), ("грош", "гроша", "грошей"), False),
        "RUB": (("рубль", "рубля", "рублей"), ("копейка", "копейки", "копеек"), True),
    }

    def hundreds(self, num: int, feminine: bool = False) -> str:
        parts: list[str] = []
        hundreds, remainder = divmod(num, 100)
        ones_table = self.digits_feminine if feminine else self.digits

        if hundreds:
            parts.append(self.hundred_words[hundreds])

        if 10 <= remainder < 20:
            parts.append(self.teens[remainder - 10])
        elif remainder:
            tens, ones = divmod(remainder, 10)
            if tens:
                parts.append(self.tens[tens])
            if ones:
                parts.append(ones_table[ones])

        return " ".join(parts)

    def feminine_group(self, scale_index: int) -> bool:
        return scale_index == 1  # тысяча is feminine: "одна тысяча", "две тысячи"

    def scale_word(self, scale_index: int, group: int) -> str:
        if not 0 < scale_index < len(self.scales):
            return ""
        if scale_index == 1:
            return plural_form_ru(group, ("тысяча", "тысячи", "тысяч"))
        base = self.scales[scale_index]
        return plural_form_ru(group, (base, base + "а", base + "ов"))

    def currency_name(self, currency: Currency, amount: int) -> str:
        return plural_form_ru(amount, self.currencies[currency][0])

    def fractional_name(self, currency: Currency, amount: int) -> str:
        return plural_form_ru(amount, self.currencies[currency][1])

    def fraction_to_words(self, currency: Currency, cents: int) -> str:
        if not cents:
            return self.zero_word
        return self.hundreds(cents, feminine=self.currencies[currency][2])

    def check_writing_suffix(self, currency: Currency, integer: int, cents: str) -> str:
        return (
            f"{self.currency_name(currency, integer)} {cents} "
            f"{self.fractional_name(currency, int(cents))}"
        )

    def vat_phrase(self, rate: str, amount_words: str) -> str:
        return f", в том числе ндс ({rate}%) в размере {amount_words}"


class GermanWords(LocaleWords):
    language = "de"
    digits = ("null", "eins", "zwei", "drei", "vier", "fünf", "sechs", "sieben", "acht", "neun")
    units = ("", "ein", "zwei", "drei", "vier", "fünf", "sechs", "sieben", "acht", "neun")
    teens = (
        "zehn", "elf", "zwölf", "dreizehn", "vierzehn",
        "fünfzehn", "sechzehn", "siebzehn", "achtzehn", "neunzehn",
    )
    tens = ("", "", "zwanzig", "dreißig", "vierzig", "fünfzig", "sechzig", "siebzig", "achtzig", "neunzig")
    scales = (
        "", "tausend", "Million", "Milliarde", "Billion", "Billiarde", "Trillion",
        "Trilliarde", "Quadrillion", "Quadrilliarde", "Quintillion", "Quintilliarde",
        "Sextillion", "Sextilliarde", "Septillion", "Septilliarde", "Oktillion",
        "Oktilliarde", "Nonillion", "Nonilliarde", "Dezillion", "Dezilliarde",
    )
    zero_word = "null"
    minus_word = "minus"
    and_word = "und"
    point_word = "Komma"
    compound_below_million = True

    currencies = {
        "USD": ("US-Dollar", "US-Dollar", "Cent", "Cent"),
        "GBP": ("britisches Pfund", "britische Pfund", "Penny", "Pence"),
        "EUR": ("Euro", "Euro", "Cent", "Cent"),
        "PLN": ("Złoty", "Złoty", "Grosz", "Grosze"),
        "RUB": ("Rubel", "Rubel", "Kopeke", "Kopeken"),
    }

    def hundreds(self, num: int, feminine: bool = False) -> str:
        hundreds, remainder = divmod(num, 100)
        text = f"{self.units[hundreds]}hundert" if hundreds else ""

        if 10 <= remainder < 20:
            text += self.teens[remainder - 10]
        elif remainder:
            tens, ones = divmod(remainder, 10)
            if tens:
                text += (f"{self.units[ones]}und" if ones else "") + self.tens[tens]
            else:
                text += self.digits[ones]

        return text

    def scale_word(self, scale_index: int, group: int) -> str:
        name = super().scale_word(scale_index, group)
        if scale_index < 2 or not name or group == 1:
            return name
        return name + ("n" if name.endswith("e") else "en")

    def group_words(self, group: int, scale_index: int) -> str:
        words = self.hundreds(group)
        if scale_index == 1:
            # "eins" loses its s inside a compound: eintausend, einhunderteintausend
            return (words[:-1] if words.endswith("eins") else words) + "tausend"
        scale = self.scale_word(scale_index, group)
        if not scale:
            return words
        return f"{'eine' if group == 1 else words} {scale}"

    def vat_phrase(self, rate: str, amount_words: str) -> str:
        return f", einschließlich mwst ({rate}%) in höhe von {amount_words}"


class SpanishWords(LocaleWords):
    """Spanish uses the long scale: each name covers six digits (millón,
    billón = 10^12), and thousands of a name read "mil millones"."""

    language = "es"
    digits = ("cero", "uno", "dos", "tres", "cuatro", "cinco", "seis", "siete", "ocho", "nueve")
    teens = (
        "diez", "once", "doce", "trece", "catorce",
        "quince", "dieciséis", "diecisiete", "dieciocho", "diecinueve",
    )
    twenties = (
        "veinte", "veintiuno", "veintidós", "veintitrés", "veinticuatro",
        "veinticinco", "veintiséis", "veintisiete", "veintiocho", "veintinueve",
    )
    tens = ("", "", "veinte", "treinta", "cuarenta", "cincuenta", "sesenta", "setenta", "ochenta", "noventa")
    hundred_words = (
        "", "ciento", "doscientos", "trescientos", "cuatrocientos",
        "quinientos", "seiscientos", "setecientos", "ochocientos", "novecientos",
    )
    millions = (
        "millón", "billón", "trillón", "cuatrillón", "quintillón",
        "sextillón", "septillón", "octillón", "nonillón", "decillón",
    )
    zero_word = "cero"
    minus_word = "menos"
    and_word = "y"
    point_word = "coma"

    currencies = {
        "USD": ("dólar estadounidense", "dólares estadounidenses", "centavo", "centavos"),
        "GBP": ("libra esterlina", "libras esterlinas", "penique", "peniques"),
        "EUR": ("euro", "euros", "céntimo", "céntimos"),
        "PLN": ("esloti", "eslotis", "grosz", "groszy"),
        "RUB": ("rublo", "rublos", "kopek", "kopeks"),
    }

    def hundreds(self, num: int, feminine: bool = False) -> str:
        if num == 100:
            return "cien"
        hundreds, remainder = divmod(num, 100)
        parts = [self.hundred_words[hundreds]] if hundreds else []
        if remainder:
            parts.append(self._tens(remainder))
        return " ".join(parts)

    def _tens(self, num: int) -> str:
        if num < 10:
            return self.digits[num]
        if num < 20:
            return self.teens[num - 10]
        if num < 30:
            return self.twenties[num - 20]
        tens, ones = divmod(num, 10)
        return f"{self.tens[tens]} y {self.digits[ones]}" if ones else self.tens[tens]

    def _below_million(self, num: int) -> str:
        thousands, rest = divmod(num, 1000)
        parts: list[str] = []
        if thousands == 1:
            parts.append("mil")
        elif thousands:
            parts.append(f"{_apocope(self.hundreds(thousands))} mil")
        if rest:
            parts.append(self.hundreds(rest))
        return " ".join(parts)

    def integer_to_words(self, integer: str) -> str:
        integer = integer.lstrip("0")
        if not integer:
            return self.zero_word

        chunks = [integer[max(0, end - 6) : end] for end in range(len(integer), 0, -6)]
        words: list[str] = []

        for index in range(len(chunks) - 1, -1, -1):
            chunk = int(chunks[index])
            if chunk == 0:
                continue
            text = self._below_million(chunk)
            if 0 < index <= len(self.millions):
                name = self.millions[index - 1]
                text = f"un {name}" if chunk == 1 else f"{_apocope(text)} {name[:-2]}ones"
            words.append(text)

        return " ".join(words)

    def vat_phrase(self, rate: str, amount_words: str) -> str:
        return f", incluido el iva ({rate}%) por un importe de {amount_words}"


def _apocope(words: str) -> str:
    """Shorten a trailing "uno" before a noun: veintiún mil, un millón."""
    if words.endswith("veintiuno"):
        return words[: -len("veintiuno")] + "veintiún"
    if words.endswith("uno"):
        return words[:-1]
    return words


class FrenchWords(LocaleWords):
    language = "fr"
    digits = ("zéro", "un", "deux", "trois", "quatre", "cinq", "six", "sept", "huit", "neuf")
    teens = (
        "dix", "onze", "douze", "treize", "quatorze",
        "quinze", "seize", "dix-sept", "dix-huit", "dix-neuf",
    )
    tens = ("", "", "vingt", "trente", "quarante", "cinquante", "soixante")
    scales = (
        "", "mille", "million", "milliard", "billion", "billiard", "trillion",
        "trilliard", "quadrillion", "quadrilliard", "quintillion", "quintilliard",
        "sextillion", "sextilliard", "septillion", "septilliard", "octillion",
        "octilliard", "nonillion", "nonilliard", "décillion", "décilliard",
    )
    zero_word = "zéro"
    minus_word = "moins"
    and_word = "et"
    point_word = "virgule"

    currencies = {
        "USD": ("dollar américain", "dollars américains", "cent", "cents"),
        "GBP": ("livre sterling", "livres sterling", "penny", "pence"),
        "EUR": ("euro", "euros", "centime", "centimes"),
        "PLN": ("zloty", "zlotys", "grosz", "groszy"),
        "RUB": ("rouble", "roubles", "kopek", "kopeks"),
    }

    def _tens(self, num: int) -> str:
        if num < 10:
            return self.digits[num]
        if num < 20:
            return self.teens[num - 10]

        tens, ones = divmod(num, 10)
        if tens == 7:
            return "soixante-et-onze" if ones == 1 else f"soixante-{self.teens[ones]}"
        if tens == 8:
            return f"quatre-vingt-{self.digits[ones]}" if ones else "quatre-vingts"
        if tens == 9:
            return f"quatre-vingt-{self.teens[ones]}"
        if ones == 1:
            return f"{self.tens[tens]}-et-un"
        return f"{self.tens[tens]}-{self.digits[ones]}" if ones else self.tens[tens]

    def hundreds(self, num: int, feminine: bool = False) -> str:
        parts: list[str] = []
        hundreds, remainder = divmod(num, 100)

        if hundreds:
            word = "cent" if hundreds == 1 else f"{self.digits[hundreds]} cent"
            if hundreds > 1 and not remainder:
                word += "s"
            parts.append(word)
        if remainder:
            parts.append(self._tens(remainder))

        return " ".join(parts)

    def scale_word(self, scale_index: int, group: int) -> str:
        name = super().scale_word(scale_index, group)
        if scale_index >= 2 and name and group > 1:
            return name + "s"
        return name

    def group_words(self, group: int, scale_index: int) -> str:
        words = self.hundreds(group)
        if scale_index == 1:
            if group == 1:
                return "mille"
            # "cents" and "vingts" drop the s before mille
            if words.endswith(("cents", "vingts")):
                words = words[:-1]
        scale = self.scale_word(scale_index, group)
        return f"{words} {scale}" if scale else words

    def vat_phrase(self, rate: str, amount_words: str) -> str:
        return f", tva incluse ({rate}%) d'un montant de {amount_words}"


class ItalianWords(LocaleWords):
    language = "it"
    digits = ("zero", "uno", "due", "tre", "quattro", "cinque", "sei", "sette", "otto", "nove")
    teens = (
        "dieci", "undici", "dodici", "tredici", "quattordici",
        "quindici", "sedici", "diciassette", "diciotto", "diciannove",
    )
    tens = ("", "", "venti", "trenta", "quaranta", "cinquanta", "sessanta", "settanta", "ottanta", "novanta")
    scales = (
        "", "mila", "milione", "miliardo", "bilione", "biliardo", "trilione",
        "triliardo", "quadrilione", "quadriliardo", "quintilione", "quintiliardo",
        "sestilione", "sestiliardo", "settilione", "settiliardo", "ottilione",
        "ottiliardo", "nonilione", "noniliardo", "decilione", "deciliardo",
    )
    zero_word = "zero"
    minus_word = "meno"
    and_word = "e"
    point_word = "virgola"
    compound_below_million = True

    currencies = {
        "USD": ("dollaro statunitense", "dollari statunitensi", "centesimo", "centesimi"),
        "GBP": ("sterlina britannica", "sterline britanniche", "penny", "pence"),
        "EUR": ("euro", "euro", "centesimo", "centesimi"),
        "PLN": ("zloty", "zloty", "grosz", "groszy"),
        "RUB": ("rublo", "rubli", "kopek", "kopeks"),
    }

    def hundreds(self, num: int, feminine: bool = False) -> str:
        hundreds, remainder = divmod(num, 100)
        text = ""
        if hundreds:
            text = "cento" if hundreds == 1 else f"{self.digits[hundreds]}cento"

        if 10 <= remainder < 20:
            text += self.teens[remainder - 10]
        elif remainder:
            tens, ones = divmod(remainder, 10)
            if not tens:
                return text + self.digits[ones]
            word = self.tens[tens]
            if ones in (1, 8):
                word = word[:-1]  # ventuno, ventotto
            if ones == 3:
                word += "tré"
            elif ones:
                word += self.digits[ones]
            text += word

        return text

    def scale_word(self, scale_index: int, group: int) -> str:
        name = super().scale_word(scale_index, group)
        if scale_index < 2 or not name or group == 1:
            return name
        return name[:-1] + "i"  # milione -> milioni, miliardo -> miliardi

    def group_words(self, group: int, scale_index: int) -> str:
        if scale_index == 1:
            return "mille" if group == 1 else self.hundreds(group) + "mila"
        scale = self.scale_word(scale_index, group)
        if not scale:
            return self.hundreds(group)
        return f"un {scale}" if group == 1 else f"{self.hundreds(group)} {scale}"

    def vat_phrase(self, rate: str, amount_words: str) -> str:
        return f", iva inclusa ({rate}%) per un importo di {amount_words}"


class PolishWords(LocaleWords):
    language = "pl"
    digits = ("zero", "jeden", "dwa", "trzy", "cztery", "pięć", "sześć", "siedem", "osiem", "dziewięć")
    teens = (
        "dziesięć", "jedenaście", "dwanaście", "trzynaście", "czternaście",
        "piętnaście", "szesnaście", "siedemnaście", "osiemnaście", "dziewiętnaście",
    )
    tens = (
        "", "", "dwadzieścia", "trzydzieści", "czterdzieści",
        "pięćdziesiąt", "sześćdziesiąt", "siedemdziesiąt", "osiemdziesiąt", "dziewięćdziesiąt",
    )
    hundred_words = (
        "", "sto", "dwieście", "trzysta", "czterysta",
        "pięćset", "sześćset", "siedemset", "osiemset", "dziewięćset",
    )
    scales = (
        "", "tysiąc", "milion", "miliard", "bilion", "biliard", "trylion",
        "tryliard", "kwadrylion", "kwadryliard", "kwintylion", "kwintyliard",
        "sekstylion", "sekstyliard", "septylion", "septyliard", "oktylion",
        "oktyliard", "nonylion", "nonyliard", "decylion", "decyliard",
    )
    zero_word = "zero"
    minus_word = "minus"
    and_word = "i"
    point_word = "przecinek"

    # (one, few, many) forms for the main and fractional unit
    currencies: dict[str, tuple[tuple[str, str, str], tuple[str, str, str]]] = {
        "USD": (
            ("dolar amerykański", "dolary amerykańskie", "dolarów amerykańskich"),
            ("cent", "centy", "centów"),
        ),
        "GBP": (("funt szterling", "funty szterlingi", "funtów szterlingów"), ("pens", "pensy", "pensów")),
        "EUR": (("euro", "euro", "euro"), ("cent", "centy", "centów")),
        "PLN": (("złoty", "złote", "złotych"), ("grosz", "grosze", "groszy")),
        "RUB": (("rubel", "ruble", "rubli"), ("kopiejka", "kopiejki", "kopiejek")),
    }

    def hundreds(self, num: int, feminine: bool = False) -> str:
        parts: list[str] = []
        hundreds, remainder = divmod(num, 100)

        if hundreds:
            parts.append(self.hundred_words[hundreds])

        if 10 <= remainder < 20:
            parts.append(self.teens[remainder - 10])
        elif remainder:
            tens, ones = divmod(remainder, 10)
            if tens:
                parts.append(self.tens[tens])
            if ones:
                parts.append(self.digits[ones])

        return " ".join(parts)

    def scale_word(self, scale_index: int, group: int) -> str:
        if not 0 < scale_index < len(self.scales):
            return ""
        if scale_index == 1:
            return plural_form_pl(group, ("tysiąc", "tysiące", "tysięcy"))
        base = self.scales[scale_index]
        return plural_form_pl(group, (base, base + "y", base + "ów"))

    def group_words(self, group: int, scale_index: int) -> str:
        scale = self.scale_word(scale_index, group)
        if scale and group == 1:
            return scale  # "tysiąc", "milion"
        return super().group_words(group, scale_index)

    def currency_name(self, currency: Currency, amount: int) -> str:
        return plural_form_pl(amount, self.currencies[currency][0])

    def fractional_name(self, currency: Currency, amount: int) -> str:
        return plural_form_pl(amount, self.currencies[currency][1])

    def vat_phrase(self, rate: str, amount_words: str) -> str:
        return f", w tym vat ({rate}%) w kwocie {amount_words}"


class LatvianWords(LocaleWords):
    language = "lv"
    digits = ("nulle", "viens", "divi", "trīs", "četri", "pieci", "seši", "septiņi", "astoņi", "deviņi")
    teens = (
        "desmit", "vienpadsmit", "divpadsmit", "trīspadsmit", "četrpadsmit",
        "piecpadsmit", "sešpadsmit", "septiņpadsmit", "astoņpadsmit", "deviņpadsmit",
    )
    tens = (
        "", "", "divdesmit", "trīsdesmit", "četrdesmit",
        "piecdesmit", "sešdesmit", "septiņdesmit", "astoņdesmit", "deviņdesmit",
    )
    hundred_words = (
        "", "simts", "divi simti", "trīs simti", "četri simti",
        "pieci simti", "seši simti", "septiņi simti", "astoņi simti", "deviņi simti",
    )
    scales = (
        "", "tūkstotis", "miljons", "miljards", "biljons", "biljards", "triljons",
        "triljards", "kvadriljons", "kvadriljards", "kvintiljons", "kvintiljards",
        "sekstiljons", "sekstiljards", "septiljons", "septiljards", "oktiljons",
        "oktiljards", "noniljons", "noniljards", "deciljons", "deciljards",
    )
    zero_word = "nulle"
    minus_word = "mīnus"
    and_word = "un"
    point_word = "komats"

    currencies = {
        "USD": ("asv dolārs", "asv dolāri", "cents", "centi"),
        "GBP": ("lielbritānijas mārciņa", "lielbritānijas mārciņas", "penss", "pensi"),
        "EUR": ("eiro", "eiro", "cents", "centi"),
        "PLN": ("zloti", "zloti", "grosz", "groszi"),
        "RUB": ("krievijas rublis", "krievijas rubļi", "kapeika", "kapeikas"),
    }

    def hundreds(self, num: int, feminine: bool = False) -> str:
        parts: list[str] = []
        hundreds, remainder = divmod(num, 100)

        if hundreds:
            parts.append(self.hundred_words[hundreds])

        if 10 <= remainder < 20:
            parts.append(self.teens[remainder - 10])
        elif remainder:
            tens, ones = divmod(remainder, 10)
            if tens:
                parts.append(self.tens[tens])
            if ones:
                parts.append(self.digits[ones])

        return " ".join(parts)

    def scale_word(self, scale_index: int, group: int) -> str:
        name = super().scale_word(scale_index, group)
        if not name or _latvian_singular(group):
            return name
        return "tūkstoši" if scale_index == 1 else name[:-1] + "i"

    def currency_name(self, currency: Currency, amount: int) -> str:
        name, plural, _, _ = self.currencies[currency]
        return name if _latvian_singular(amount) else plural

    def fractional_name(self, currency: Currency, amount: int) -> str:
        _, _, fractional, fractional_plural = self.currencies[currency]
        return fractional if _latvian_singular(amount) else fractional_plural

    def vat_phrase(self, rate: str, amount_words: str) -> str:
        return f", ieskaitot pvn ({rate}%) summu {amount_words}"


def plural_form_ru(amount: int, forms: tuple[str, str, str]) -> str:
    """Pick the Russian noun form for `amount`.

    ...11-19 -> genitive plural, ...1 -> nominative singular,
    ...2-4 -> genitive singular, everything else -> genitive plural.
    """
    mod100 = amount % 100
    mod10 = amount % 10
    if 11 <= mod100 <= 19:
        return forms[2]
    if mod10 == 1:
        return forms[0]
    if 2 <= mod10 <= 4:
        return forms[1]
    return forms[2]


def plural_form_pl(amount: int, forms: tuple[str, str, str]) -> str:
    """Pick the Polish noun form for `amount`.

    Exactly 1 -> singular, ...2-4 except ...12-14 -> nominative plural,
    everything else (including 21, 31) -> genitive plural.
    """
    if amount == 1:
        return forms[0]
    if 2 <= amount % 10 <= 4 and not 12 <= amount % 100 <= 14:
        return forms[1]
    return forms[2]


def _latvian_singular(amount: int) -> bool:
    return amount % 10 == 1 and amount % 100 != 11


PROCESSORS: dict[str, LocaleWords] = {
    "en": EnglishWords(),
    "ru": RussianWords(),
    "de": GermanWords(),
    "es": SpanishWords(),
    "fr": FrenchWords(),
    "it": ItalianWords(),
    "pl": PolishWords(),
    "lv": LatvianWords(),
}


def get_processor(language: str | None) -> LocaleWords:
    """Return the processor for `language`, falling back to English."""
    tag = (language or "en").lower().split("-")[0]
    processor = PROCESSORS.get(tag)
    if processor is None:
        logger.debug("No number wording for language %r, using English", language)
        return PROCESSORS["en"]
    return processor


# ─── Public API ──────────────────────────────────────────────────────


def number_to_words(
    value: Any, options: NumberToWordsOptions | None = None
) -> NumberToWordsResult:
    """Convert `value` to words according to `options`.

    Raises:
        InvalidNumberError: If `value` is not a decimal number.
    """
    options = options or NumberToWordsOptions()
    words = get_processor(options.language)
    number = parse_decimal(value)

    calculated_total: float | None = None
    vat_amount: Decimal | None = None
    principal_amount: float | None = None

    vat_rate = options.vat_rate
    apply_vat = options.mode == "currency_vat" and math.isfinite(vat_rate) and vat_rate > 0

    if apply_vat:
        with localcontext() as ctx:
            ctx.prec = len(number.integer) + len(number.decimal) + 40
            principal = number.as_decimal()
            vat_amount = principal * Decimal(str(vat_rate)) / 100
            total = principal + vat_amount
            rounded = abs(total).quantize(_CENT, rounding=ROUND_HALF_UP)
        principal_amount = float(principal)
        calculated_total = float(total)
        integer, _, decimal = str(rounded).partition(".")
        number = ParsedNumber(integer, decimal, total < 0)

    text = words.integer_to_words(number.integer)
    if number.is_negative and not number.is_zero:
        text = f"{words.minus_word} {text}"

    if options.mode == "words":
        fraction = number.decimal.rstrip("0")
        if fraction:
            text += f" {words.point_word} {words.digit_words(fraction)}"

    elif options.mode == "check_writing":
        amount = _declension_key(number.integer)
        # Any non-zero fraction gets the XX/100 part, even when its cents are 00
        if number.decimal.strip("0"):
            text += " " + words.check_writing_suffix(
                options.currency, amount, _cents(number.decimal)
            )
        else:
            text += " " + words.currency_name(options.currency, amount)

    else:
        text += " " + _currency_phrase(words, options.currency, number.integer, number.decimal)
        if apply_vat and vat_amount is not None:
            with localcontext() as ctx:
                ctx.prec = len(number.integer) + 40
                vat = abs(vat_amount).quantize(_CENT, rounding=ROUND_HALF_UP)
            vat_integer, _, vat_decimal = str(vat).partition(".")
            vat_words = words.integer_to_words(vat_integer) + " " + _currency_phrase(
                words, options.currency, vat_integer, vat_decimal
            )
            text += words.vat_phrase(_format_rate(vat_rate), vat_words)

    return NumberToWordsResult(
        text_result=_apply_text_case(text.lower(), options.text_case),
        calculated_total=calculated_total,
        vat_amount=float(vat_amount) if vat_amount is not None else None,
        principal_amount=principal_amount,
    )


# ─── Internal Helpers ────────────────────────────────────────────────


def _cents(decimal: str) -> str:
    """First two fractional digits, right-padded ("5" -> "50")."""
    return decimal[:2].ljust(2, "0")


def _declension_key(integer: str) -> int:
    """A small int standing in for `integer` when choosing noun forms.

    Keeps the last two digits and equals 1 only when `integer` is 1, which
    is all any locale's plural rule looks at. Avoids converting integers of
    thousands of digits.
    """
    integer = integer.lstrip("0") or "0"
    if len(integer) <= 3:
        return int(integer)
    return 1000 + int(integer[-2:])


def _currency_phrase(words: LocaleWords, currency: Currency, integer: str, decimal: str) -> str:
    """'<currency> and <fraction words> <fractional unit>' for an amount."""
    cents = int(_cents(decimal))
    return (
        f"{words.currency_name(currency, _declension_key(integer))} {words.and_word} "
        f"{words.fraction_to_words(currency, cents)} {words.fractional_name(currency, cents)}"
    )


def _format_rate(rate: float) -> str:
    return str(int(rate)) if rate == int(rate) else str(rate)


def _apply_text_case(text: str, text_case: TextCase) -> str:
    if text_case == "UPPERCASE":
        return text.upper()
    if text_case == "Title Case":
        return convert_case(text, "title")
    if text_case == "Sentence case":
        return text[:1].upper() + text[1:]
    return text
