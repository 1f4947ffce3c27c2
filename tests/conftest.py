# Provides the ``afs`` fixture: no owner, no capacity ceiling, and a fixed
# clock equal to tests.helpers.clock.FIXED_TS.
pytest_plugins = ["arenafs._pytest_plugin"]
