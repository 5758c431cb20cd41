from pathlib import Path

import family_budget

PACKAGE_DIR = Path(family_budget.__file__).resolve().parent


def test_modules_are_plain_ascii():
    for path in sorted(PACKAGE_DIR.glob('*.py')):
        path.read_bytes().decode('ascii')


def test_package_exports():
    assert family_budget.calculator.add(1, 2) == 3.0
    assert 'PlannerReconciler' in family_budget.__all__
