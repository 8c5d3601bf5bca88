"""
Repositories - read-only lookups over the CSV data files.

Loaded with pandas the same way for every file: all columns as strings,
stripped, blanks kept as ''.
"""
import logging
from pathlib import Path
from typing import Optional

import pandas as pd

from ..engine.models import MembershipPricingRule, WorkshopPricingConfig

logger = logging.getLogger(__name__)

TRUE_VALUES = {'true', '1', 'yes', 'y', 't'}


def _load_csv(path: Optional[Path], columns: list[str]) -> pd.DataFrame:
    if path is None or not path.exists():
        logger.warning("Data file not found: %s", path)
        return pd.DataFrame(columns=columns)

    df = pd.read_csv(path, dtype=str, keep_default_na=False)
    df.columns = [c.strip() for c in df.columns]
    for col in df.columns:
        df[col] = df[col].astype(str).str.strip()
    return df


def _to_int(value) -> Optional[int]:
    """Blank cells give None; anything that is not a whole number raises ValueError."""
    if value is None:
        return None
    text = str(value).strip()
    if text == '' or text.lower() in ('nan', 'none', 'null'):
        return None
    return int(text)


def _to_bool(value) -> bool:
    return str(value).strip().lower() in TRUE_VALUES


def _drop_malformed(df: pd.DataFrame, parse_row, path: Optional[Path]) -> pd.DataFrame:
    """Drop rows that parse_row rejects, logging each one."""
    if df.empty:
        return df

    keep = []
    for idx, row in df.iterrows():
        try:
            parse_row(row)
        except ValueError as e:
            logger.warning("Skipping malformed row %s in %s: %s", idx, path, e)
            keep.append(False)
        else:
            keep.append(True)
    return df[pd.Series(keep, index=df.index, dtype=bool)]


class MembershipRuleRepository:
    """
    Membership pricing rules keyed by membership level.

    Lookups are exact and case-sensitive: "student" does not match "Student".
    Rows with a blank or non-integer percentage are skipped at load time.
    """

    COLUMNS = ['id', 'membership_level', 'percentage_paid', 'created_at', 'updated_at']

    def __init__(self, csv_path: Optional[Path]):
        self.csv_path = csv_path
        self.rules_df = self._load()

    def reload(self):
        """Reload rules from disk."""
        self.rules_df = self._load()

    def _load(self) -> pd.DataFrame:
        df = _load_csv(self.csv_path, self.COLUMNS)
        return _drop_malformed(df, self._to_rule, self.csv_path)

    def _to_rule(self, row: pd.Series) -> MembershipPricingRule:
        percentage_paid = _to_int(row['percentage_paid'])
        if percentage_paid is None:
            raise ValueError(f"no percentage_paid for {row['membership_level']!r}")
        return MembershipPricingRule(
            membership_level=row['membership_level'],
            percentage_paid=percentage_paid,
            id=_to_int(row.get('id')),
            created_at=row.get('created_at') or None,
            updated_at=row.get('updated_at') or None,
        )

    def all(self) -> list[MembershipPricingRule]:
        if self.rules_df.empty:
            return []
        ordered = self.rules_df.sort_values('membership_level')
        return [self._to_rule(row) for _, row in ordered.iterrows()]

    def find_by_level(self, membership_level: str) -> Optional[MembershipPricingRule]:
        """Return the rule for a membership level, or None."""
        if self.rules_df.empty or not membership_level:
            return None

        match = self.rules_df[self.rules_df['membership_level'] == membership_level]
        if match.empty:
            return None
        return self._to_rule(match.iloc[0])

    def levels(self) -> list[str]:
        return [rule.membership_level for rule in self.all()]


class WorkshopRepository:
    """Workshop pricing configuration keyed by workshop id. Malformed rows are skipped."""

    COLUMNS = ['id', 'title', 'is_paid', 'base_cost', 'global_discount_percentage']

    def __init__(self, csv_path: Optional[Path]):
        self.csv_path = csv_path
        self.workshops_df = self._load()

    def reload(self):
        """Reload workshops from disk."""
        self.workshops_df = self._load()

    def _load(self) -> pd.DataFrame:
        df = _load_csv(self.csv_path, self.COLUMNS)
        return _drop_malformed(df, self._to_workshop, self.csv_path)

    def _to_workshop(self, row: pd.Series) -> WorkshopPricingConfig:
        return WorkshopPricingConfig(
            is_paid=_to_bool(row.get('is_paid', '')),
            base_cost=_to_int(row.get('base_cost')),
            global_discount_percentage=_to_int(row.get('global_discount_percentage')) or 0,
            workshop_id=_to_int(row['id']),
            title=row.get('title') or None,
        )

    def all(self) -> list[WorkshopPricingConfig]:
        return [self._to_workshop(row) for _, row in self.workshops_df.iterrows()]

    def get(self, workshop_id: int) -> Optional[WorkshopPricingConfig]:
        """Return a workshop by id, or None."""
        if self.workshops_df.empty:
            return None

        match = self.workshops_df[self.workshops_df['id'] == str(workshop_id)]
        if match.empty:
            return None
        return self._to_workshop(match.iloc[0])
