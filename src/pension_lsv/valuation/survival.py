"""
Monthly survival model.

Theory
------
[T1] UDD within the year: monthly survival p = 1 - qx/12
[T1] kp = Π_{j=1..k} (1 - q_{a(j)}/12), a(j) = floor(age + (j-1)/12)

Ages missing from the table take qx = 1 (certain death).
"""

import numpy as np

from pension_lsv.config.settings import SETTINGS
from pension_lsv.loaders.mortality import MortalityTable


def monthly_survival(
    table: MortalityTable,
    age_at_start: float,
    n_months: int,
    max_age: int | None = None,
) -> np.ndarray:
    """
    Survival probabilities at each month end.

    Parameters
    ----------
    table : MortalityTable
        Integer-age mortality rates
    age_at_start : float
        Fractional age at month 0
    n_months : int
        Number of months to project
    max_age : int, optional
        Attained ages are clamped to [0, max_age]. Defaults to settings.

    Returns
    -------
    ndarray
        Length n_months + 1; element k is the probability of surviving
        k months. Non-increasing, within [0, 1], element 0 is 1.

    Examples
    --------
    >>> table = MortalityTable({65: 0.12})
    >>> surv = monthly_survival(table, 65.0, 2)
    >>> round(float(surv[2]), 6)
    0.9801
    """
    if max_age is None:
        max_age = SETTINGS.valuation.max_age
    n_months = max(0, int(n_months))

    k = np.arange(1, n_months + 1)
    attained = np.floor(age_at_start + (k - 1) / 12.0)
    attained = np.clip(attained, 0, max_age).astype(int)

    qx = np.array([table.get_qx(int(a)) for a in attained], dtype=float)
    p_month = 1.0 - np.clip(qx, 0.0, 1.0) / 12.0

    surv = np.empty(n_months + 1, dtype=float)
    surv[0] = 1.0
    surv[1:] = np.cumprod(p_month)
    return surv
