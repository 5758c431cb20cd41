"""JSON persistence for the budget document.

The engine works on in-memory :class:`~family_budget.state.BudgetState`
values only; this module is the adapter that reads and writes them.
Missing or corrupt files resolve to an empty budget rather than raising.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from .config import BUDGET_FILE
from .state import BudgetState, load_state

logger = logging.getLogger(__name__)

DOCUMENT_VERSION = 2
DEFAULT_DOCUMENT: Dict[str, Any] = {
    'income': [],
    'monthly': {},
    'annual': {},
    'accounts': [],
    'plannerState': {},
    'categoryNames': {},
    'notes': '',
    'version': DOCUMENT_VERSION,
}


def export_document(state: BudgetState) -> Dict[str, Any]:
    """Plain, JSON-serialisable document for ``state``."""
    return {
        'income': [source.to_dict() for source in state.income],
        'monthly': {key: [e.to_dict() for e in items] for key, items in state.monthly.items()},
        'annual': {key: [e.to_dict() for e in items] for key, items in state.annual.items()},
        'accounts': [dict(a) for a in state.accounts],
        'plannerState': dict(state.planner),
        'categoryNames': dict(state.category_names),
        'notes': state.notes,
        'lastUpdated': state.last_updated,
        'version': DOCUMENT_VERSION,
    }


IMPORT_REQUIRED_KEYS = ('income', 'monthly', 'annual', 'accounts')


def unwrap_document(data: Dict[str, Any]) -> Dict[str, Any]:
    """Budget payload of ``data``.

    Exports carry the budget under a ``data`` key next to
    ``exportDate`` and ``version``; plain documents are returned as-is.
    """
    payload = data.get('data')
    return payload if isinstance(payload, dict) else data


def _structure_problem(budget: Dict[str, Any]) -> Optional[str]:
    for key in IMPORT_REQUIRED_KEYS:
        if key not in budget:
            return f"missing required property '{key}'"
    if not isinstance(budget['income'], list):
        return "income must be a list"
    if not isinstance(budget['monthly'], dict) or not isinstance(budget['annual'], dict):
        return "monthly and annual expenses must be objects"
    if not isinstance(budget['accounts'], (dict, list)):
        return "accounts must be an object or a list"
    return None


def validate_import_data(data: Any) -> Dict[str, Any]:
    """Check an uploaded document before it replaces the current budget.

    Args:
        data: Parsed JSON, either an export (budget under ``data``) or
            a bare budget document.

    Returns:
        ``{'valid': False, 'error': ...}`` for unusable input, otherwise
        ``{'valid': True, 'data': budget, 'stats': {...}}`` where the stats
        hold ``total_expenses``, ``has_income`` and ``has_accounts``.
    """
    if not isinstance(data, dict):
        return {'valid': False, 'error': 'Invalid data format'}
    budget = unwrap_document(data)
    problem = _structure_problem(budget)
    if problem:
        return {'valid': False, 'error': f"Invalid budget data structure: {problem}"}

    total_expenses = sum(
        len(items)
        for collection in (budget['monthly'], budget['annual'])
        for items in collection.values()
        if isinstance(items, list)
    )
    return {
        'valid': True,
        'data': budget,
        'stats': {
            'total_expenses': total_expenses,
            'has_income': len(budget['income']) > 0,
            'has_accounts': len(budget['accounts']) > 0,
        },
    }


def import_document(data: Any) -> BudgetState:
    """State from a loaded document; anything that is not a dict is ignored.

    Exported documents are unwrapped first.  Missing sections fall back to
    the empty defaults.
    """
    if not isinstance(data, dict):
        logger.warning("Budget document is not an object; starting from an empty budget")
        return load_state(DEFAULT_DOCUMENT)
    budget = unwrap_document(data)
    if budget is not data:
        logger.info("Unwrapped exported budget (version %s)", data.get('version', 'unknown'))
    return load_state({**DEFAULT_DOCUMENT, **budget})


class BudgetStorage:
    """Handles budget file storage operations."""

    def __init__(self, path: Optional[Path] = None):
        """Initialize budget storage.

        Args:
            path: Optional custom location of the budget JSON file.
                  Defaults to BUDGET_FILE from config.
        """
        self.path = Path(path) if path is not None else BUDGET_FILE

    def exists(self) -> bool:
        return self.path.exists()

    def load(self) -> BudgetState:
        """Load the budget, falling back to an empty one if unreadable."""
        if not self.path.exists():
            return import_document(DEFAULT_DOCUMENT)
        try:
            with self.path.open('r', encoding='utf-8') as handle:
                data = json.load(handle)
        except (json.JSONDecodeError, OSError) as e:
            logger.warning("Could not load budget from %s: %s", self.path, e)
            return import_document(DEFAULT_DOCUMENT)
        return import_document(data)

    def save(self, state: BudgetState) -> Path:
        """Write ``state`` to disk.

        Raises:
            OSError: If the file cannot be written
        """
        payload = export_document(state)
        payload['savedAt'] = datetime.now(timezone.utc).isoformat()
        self.path.parent.mkdir(parents=True, exist_ok=True)
        try:
            with self.path.open('w', encoding='utf-8') as handle:
                json.dump(payload, handle, indent=2, sort_keys=True)
        except OSError as e:
            raise OSError(f"Failed to save budget to {self.path}: {e}") from e
        logger.info("Saved budget to %s", self.path)
        return self.path

    def import_file(self, source: Path) -> Tuple[BudgetState, Dict[str, Any]]:
        """Replace the stored budget with the document at ``source``.

        Raises:
            ValueError: If the file is not JSON or fails the import check
        """
        try:
            with Path(source).open('r', encoding='utf-8') as handle:
                data = json.load(handle)
        except json.JSONDecodeError as e:
            raise ValueError(f"{source} is not valid JSON: {e}") from e
        return self.import_data(data)

    def import_data(self, data: Any) -> Tuple[BudgetState, Dict[str, Any]]:
        result = validate_import_data(data)
        if not result['valid']:
            raise ValueError(result['error'])
        state = import_document(result['data'])
        self.save(state)
        logger.info("Imported budget with %d expenses", result['stats']['total_expenses'])
        return state, result['stats']

    def delete(self) -> None:
        if not self.path.exists():
            return
        try:
            self.path.unlink()
        except OSError as e:
            raise OSError(f"Failed to delete budget file {self.path}: {e}") from e
