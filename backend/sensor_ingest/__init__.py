"""
Sensor Ingest Backend
=====================

Python package for the sensor readings API.

HOW IT'S ORGANIZED:
------------------
- models/    = Data structures (what does a reading look like?)
- services/  = Workers (store readings, check the API key)
- routers/   = API endpoints (the doors into our app)
- utils/     = Small helpers (database URL handling)
- config.py  = Settings from the environment
- errors.py  = Everything that can go wrong
- main.py    = Puts it all together and starts the server
"""
