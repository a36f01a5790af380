"""Static pattern tables for amount and date extraction.

Every regex is declared next to a descriptor that says how its match
groups are read: amount patterns carry the NumberFormat of the language
they were compiled for, date patterns carry a DateLayout and the set of
languages they are active for. The tables are built once at import and
are read-only afterwards.
"""

import re
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from types import MappingProxyType
from typing import FrozenSet, Optional, Pattern, Sequence, Tuple

from ..models import Language


@dataclass(frozen=True)
class NumberFormat:
    """Decimal and digit-grouping convention of a locale."""
    name: str
    decimal_separator: str
    group_separator: str

    @property
    def pattern(self) -> str:
        """Regex for one amount, captured as the named group 'amount'."""
        dec = re.escape(self.decimal_separator)
        grp = re.escape(self.group_separator)
        return (
            rf'(?P<amount>\d{{1,3}}(?:{grp}\d{{3}})+(?:{dec}\d{{1,2}})?(?!\d)'
            rf'|\d+(?:[.,]\d{{1,2}})?)'
        )

    def normalize(self, raw: str) -> str:
        """
        Turn a matched amount into a string Decimal() accepts.

        Grouped numbers ('1,234.56' / '1.234,56') drop the group separator.
        Plain numbers accept either '.' or ',' as the decimal point.
        """
        dec = re.escape(self.decimal_separator)
        grp = re.escape(self.group_separator)
        if re.fullmatch(rf'\d{{1,3}}(?:{grp}\d{{3}})+(?:{dec}\d{{1,2}})?', raw):
            return raw.replace(self.group_separator, '').replace(self.decimal_separator, '.')
        return raw.replace(',', '.')


DOT_DECIMAL = NumberFormat('dot_decimal', decimal_separator='.', group_separator=',')
COMMA_DECIMAL = NumberFormat('comma_decimal', decimal_separator=',', group_separator='.')

NUMBER_FORMATS = MappingProxyType({
    Language.ENGLISH: DOT_DECIMAL,
    Language.CHINESE_SIMPLIFIED: DOT_DECIMAL,
    Language.GERMAN: COMMA_DECIMAL,
})


@dataclass(frozen=True)
class AmountPattern:
    """A compiled amount regex and the number format of its 'amount' group."""
    name: str
    regex: Pattern
    number_format: NumberFormat


@dataclass(frozen=True)
class AmountTier:
    """Priority group of amount patterns sharing an exclusive value range."""
    name: str
    patterns: Tuple[AmountPattern, ...]
    lower: Decimal = Decimal('0')
    upper: Optional[Decimal] = None

    def accepts(self, value: Decimal) -> bool:
        if not value.is_finite() or value <= self.lower:
            return False
        return self.upper is None or value < self.upper


# (pattern name, regex template); '{amt}' is replaced by the language's amount regex
AmountTemplates = Sequence[Tuple[str, str]]

_CN_CAPITAL_DIGITS = '零壹贰叁肆伍陆柒捌玖拾佰仟万亿'

CHINESE_INVOICE_TOTAL: AmountTemplates = (
    # 肆佰零壹圆整（小写）¥401.00
    ('capital_amount_yen',
     rf'[{_CN_CAPITAL_DIGITS}]+[圆元]整?\s*(?:[（(][^）)\n]{{0,10}}[）)])?\s*[¥￥]\s*{{amt}}'),
    ('tax_inclusive_total', r'价税合计[^0-9]*[¥￥]\s*{amt}'),
)

CHINESE_PAID: AmountTemplates = (
    ('paid', r'实付[款金额：:\s]*[¥￥元]?\s*{amt}'),
    ('actual_payment', r'实际支付[：:\s]*[¥￥元]?\s*{amt}'),
    ('payment_amount', r'支付金额[：:\s]*[¥￥元]?\s*{amt}'),
    ('tax_included_total', r'含税合计[：:\s]*[¥￥元]?\s*{amt}'),
    ('payable_total', r'应付总额[：:\s]*[¥￥元]?\s*{amt}'),
    ('grand_total', r'总\s*计[：:\s]*[¥￥元]?\s*{amt}'),
    ('total_sum', r'总\s*额[：:\s]*[¥￥元]?\s*{amt}'),
)

CHINESE_TOTAL: AmountTemplates = (
    ('total', r'合\s*计[：:\s]*[¥￥元]?\s*{amt}'),
    ('payable', r'应付[金额：:\s]*[¥￥元]?\s*{amt}'),
    ('total_price', r'总价[：:\s]*[¥￥元]?\s*{amt}'),
    ('amount', r'金额[：:\s]*[¥￥元]?\s*{amt}'),
    ('subtotal', r'小计[：:\s]*[¥￥元]?\s*{amt}'),
    ('bare_yen', r'[¥￥]\s*{amt}'),
)

ENGLISH_TOTAL: AmountTemplates = (
    ('total', r'(?<!sub)(?<!sub )total[:\s]*\$?\s*{amt}'),
    ('grand_total', r'grand\s*total[:\s]*\$?\s*{amt}'),
    ('amount_due', r'amount\s*due[:\s]*\$?\s*{amt}'),
    ('balance_due', r'balance\s*due[:\s]*\$?\s*{amt}'),
    ('total_amount', r'total\s*amount[:\s]*\$?\s*{amt}'),
)

GERMAN_TOTAL: AmountTemplates = (
    ('sum', r'summe[:\s]*€?\s*{amt}'),
    ('total', r'gesamt[:\s]*€?\s*{amt}'),
    ('grand_total', r'gesamtbetrag[:\s]*€?\s*{amt}'),
    ('amount_payable', r'zu\s*zahlen[:\s]*€?\s*{amt}'),
    ('amount', r'betrag[:\s]*€?\s*{amt}'),
    ('bare_euro', r'€\s*{amt}'),
    ('trailing_euro', r'(?<![\d.,]){amt}\s*(?:€|eur\b)'),
)

CURRENCY_SYMBOL: AmountTemplates = (
    ('dollar', r'\$\s*{amt}'),
    ('euro', r'€\s*{amt}'),
    ('yen', r'[¥￥]\s*{amt}'),
)


def compile_tier(name: str,
                 templates: AmountTemplates,
                 number_format: NumberFormat,
                 upper: Optional[Decimal] = None) -> AmountTier:
    """Compile a tier's templates against one number format."""
    patterns = tuple(
        AmountPattern(
            name=pattern_name,
            regex=re.compile(template.replace('{amt}', number_format.pattern), re.IGNORECASE),
            number_format=number_format,
        )
        for pattern_name, template in templates
    )
    return AmountTier(name=name, patterns=patterns, upper=upper)


def _tiers_for(language: Language) -> Tuple[AmountTier, ...]:
    fmt = NUMBER_FORMATS[language]
    tiers = []
    if language == Language.CHINESE_SIMPLIFIED:
        tiers.extend([
            compile_tier('zh_invoice_total', CHINESE_INVOICE_TOTAL, fmt, upper=Decimal('10000000')),
            compile_tier('zh_paid', CHINESE_PAID, fmt),
            compile_tier('zh_total', CHINESE_TOTAL, fmt),
        ])
    # English keywords are printed on receipts in every supported locale
    tiers.append(compile_tier('en_total', ENGLISH_TOTAL, fmt))
    if language == Language.GERMAN:
        tiers.append(compile_tier('de_total', GERMAN_TOTAL, fmt))
    tiers.append(compile_tier('currency_symbol', CURRENCY_SYMBOL, fmt))
    return tuple(tiers)


AMOUNT_TIERS = MappingProxyType({language: _tiers_for(language) for language in Language})

# Last resort: every decimal with one or two fractional digits
LARGEST_DECIMAL_PATTERN = re.compile(r'\d+[.,]\d{1,2}')
LARGEST_DECIMAL_UPPER = Decimal('100000')


class DateLayout(Enum):
    """Order in which a date pattern's groups hold year, month and day."""
    YMD = 'ymd'
    MDY = 'mdy'
    DMY = 'dmy'
    MONTH_NAME_DY = 'month_name_dy'
    MD_CURRENT_YEAR = 'md_current_year'


@dataclass(frozen=True)
class DatePattern:
    """A compiled date regex, its group layout and the languages it runs for."""
    name: str
    regex: Pattern
    layout: DateLayout
    languages: Optional[FrozenSet[Language]] = None

    def active_for(self, language: Language) -> bool:
        return self.languages is None or language in self.languages


MONTH_ABBREVIATIONS = MappingProxyType({
    'jan': 1, 'feb': 2, 'mar': 3, 'apr': 4, 'may': 5, 'jun': 6,
    'jul': 7, 'aug': 8, 'sep': 9, 'oct': 10, 'nov': 11, 'dec': 12,
})

_GERMAN = frozenset({Language.GERMAN})
_CHINESE = frozenset({Language.CHINESE_SIMPLIFIED})

DATE_PATTERNS: Tuple[DatePattern, ...] = (
    DatePattern('iso_dash', re.compile(r'(?<!\d)(\d{4})-(\d{1,2})-(\d{1,2})(?!\d)'), DateLayout.YMD),
    DatePattern('iso_slash', re.compile(r'(?<!\d)(\d{4})/(\d{1,2})/(\d{1,2})(?!\d)'), DateLayout.YMD),
    DatePattern('us_numeric', re.compile(r'(?<!\d)(\d{1,2})[/\-](\d{1,2})[/\-](\d{4})(?!\d)'), DateLayout.MDY),
    DatePattern('us_short_year', re.compile(r'(?<!\d)(\d{1,2})[/\-](\d{1,2})[/\-](\d{2})(?!\d)'), DateLayout.MDY),
    DatePattern(
        'month_name',
        re.compile(r'\b(jan|feb|mar|apr|may|jun|jul|aug|sep|oct|nov|dec)[a-z]*\.?\s+(\d{1,2}),?\s*(\d{4})(?!\d)',
                   re.IGNORECASE),
        DateLayout.MONTH_NAME_DY,
    ),
    DatePattern('german_numeric', re.compile(r'(?<!\d)(\d{1,2})\.(\d{1,2})\.(\d{4})(?!\d)'),
                DateLayout.DMY, _GERMAN),
    DatePattern('german_short_year', re.compile(r'(?<![\d.])(\d{1,2})\.(\d{1,2})\.(\d{2})(?!\d)'),
                DateLayout.DMY, _GERMAN),
    DatePattern('chinese_full', re.compile(r'(\d{4})年\s*(\d{1,2})月\s*(\d{1,2})日'),
                DateLayout.YMD, _CHINESE),
    DatePattern('chinese_month_day', re.compile(r'(?<![\d年])(\d{1,2})月\s*(\d{1,2})日'),
                DateLayout.MD_CURRENT_YEAR, _CHINESE),
)
