"""
Headline templates for locally generated news.

Each template carries a fixed impact magnitude; the sign comes from the
story's polarity.
"""

from dataclasses import dataclass

from papertrade.core.enums import NewsPolarity, NewsScope


@dataclass(frozen=True)
class HeadlineTemplate:
    """A headline pattern with its sentiment impact magnitude."""

    text: str
    magnitude: float

    def render(self, company: str = "", sector: str = "") -> str:
        """Fill the {company} and {sector} placeholders."""
        return self.text.format(company=company, sector=sector)


HEADLINE_TEMPLATES: dict[tuple[NewsScope, NewsPolarity], tuple[HeadlineTemplate, ...]] = {
    (NewsScope.COMPANY, NewsPolarity.POSITIVE): (
        HeadlineTemplate("{company} Secures Major Government Contract", 0.15),
        HeadlineTemplate("{company} Announces Revolutionary Product", 0.18),
        HeadlineTemplate("{company} Exceeds Earnings Expectations by 30%", 0.12),
        HeadlineTemplate("{company} Patent Approved for Breakthrough Technology", 0.14),
        HeadlineTemplate("Activist Investor Takes Large Stake in {company}", 0.13),
    ),
    (NewsScope.COMPANY, NewsPolarity.NEGATIVE): (
        HeadlineTemplate("{company} Products Recalled Due to Safety Concerns", 0.16),
        HeadlineTemplate("{company} Loses Major Lawsuit", 0.14),
        HeadlineTemplate("{company} Earnings Fall Short of Expectations", 0.12),
        HeadlineTemplate("{company} Announces Major Restructuring", 0.13),
        HeadlineTemplate("CEO of {company} Resigns Amid Controversy", 0.15),
    ),
    (NewsScope.SECTOR, NewsPolarity.POSITIVE): (
        HeadlineTemplate("New Legislation Expected to Boost {sector} Sector", 0.09),
        HeadlineTemplate("International Agreement Benefits {sector} Companies", 0.08),
        HeadlineTemplate("Consumer Demand Surges for {sector} Products", 0.07),
        HeadlineTemplate("Research Breakthrough for {sector} Industry", 0.08),
        HeadlineTemplate("Favorable Tax Changes for {sector} Businesses", 0.07),
    ),
    (NewsScope.SECTOR, NewsPolarity.NEGATIVE): (
        HeadlineTemplate("New Regulations Impact {sector} Companies", 0.09),
        HeadlineTemplate("Supply Chain Disruptions Hit {sector} Industry", 0.08),
        HeadlineTemplate("Labor Disputes Spread Across {sector} Sector", 0.07),
        HeadlineTemplate("Declining Consumer Interest in {sector} Products", 0.08),
        HeadlineTemplate("Rising Costs Squeeze Margins in {sector} Industry", 0.07),
    ),
    (NewsScope.MARKET, NewsPolarity.POSITIVE): (
        HeadlineTemplate("Federal Reserve Signals Interest Rate Cut", 0.06),
        HeadlineTemplate("Unemployment Numbers Drop to Record Low", 0.05),
        HeadlineTemplate("Major Trade Deal Announced Between Nations", 0.07),
        HeadlineTemplate("Consumer Confidence Index Reaches 10-Year High", 0.06),
        HeadlineTemplate("Inflation Data Shows Economy Stabilizing", 0.05),
    ),
    (NewsScope.MARKET, NewsPolarity.NEGATIVE): (
        HeadlineTemplate("Federal Reserve Signals Interest Rate Hike", 0.06),
        HeadlineTemplate("Unemployment Numbers Rise Unexpectedly", 0.05),
        HeadlineTemplate("Trade Tensions Escalate Between Major Economies", 0.07),
        HeadlineTemplate("Consumer Confidence Index Falls Sharply", 0.06),
        HeadlineTemplate("Inflation Data Raises Economic Concerns", 0.05),
    ),
}


def templates_for(scope: NewsScope, polarity: NewsPolarity) -> tuple[HeadlineTemplate, ...]:
    """Get the template table for a scope and polarity."""
    return HEADLINE_TEMPLATES[(scope, polarity)]
