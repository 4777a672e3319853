import os
import tempfile

# The backend reads its settings at import time, so point the archive and the
# plot directory at a scratch location before any backend module is loaded.
_SCRATCH = tempfile.mkdtemp(prefix="cornbreeder-tests-")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{os.path.join(_SCRATCH, 'test.db')}"
os.environ["RESULTS_DIR"] = os.path.join(_SCRATCH, "results")
os.environ["ADVISOR_ENABLED"] = "true"
