"""
SmartWaste — Community Waste-Reporting Backend
================================================
Residents submit daily waste-sorting reports, neighborhood (RT)
administrators approve or reject them, and a leaderboard ranks
neighborhoods by approved points.

Package layout::

    smartwaste/
    ├── config.py          # YAML → typed Python config
    ├── constants.py       # Categories, daily cap, weights
    ├── errors.py          # Domain error taxonomy
    ├── database/
    │   ├── engine.py      # SQLAlchemy engine + session helper
    │   ├── models.py      # ORM models (neighborhoods, users, reports, challenges)
    │   └── seed.py        # Reference data seeder
    ├── engine/
    │   ├── scoring.py     # Report point calculation
    │   ├── lifecycle.py   # pending → approved | rejected transitions
    │   └── classifier.py  # Keyword classifier + eco-score
    ├── services/
    │   ├── report_service.py      # Submission + challenge awards
    │   ├── approval_service.py    # Administrator review
    │   ├── leaderboard_service.py # Neighborhood ranking
    │   └── account_service.py     # Login, registration, reference lists
    └── api/
        ├── main.py        # FastAPI app
        ├── rate_limit.py  # Per-client sliding-window throttle
        └── routes/        # REST endpoints
"""

__version__ = "0.1.0"
