"""Top-level package for the Budget Tracker.

A single-user personal budget tracker organised by financial year
(July 1 to June 30).  The primary modules are:

* ``financial_year`` – resolving financial-year labels and date ranges
* ``aggregation`` – income, expense, monthly and per-category figures
* ``state`` – the transaction and category stores with their mutations
* ``storage`` – JSON persistence of the state snapshot
* ``importer`` / ``exports`` – spreadsheet import and CSV/PDF export
* ``Home.py`` and ``pages/`` – the Streamlit multi-page app

To run the app from the command line you can execute:

```bash
python run_app.py
```
"""

__version__ = "1.0.0"
