"""
Core constants — **Single Source of Truth** for project-wide magic values.

Any rule that references a platform constant (module names, role codes,
wire date formats, well-known workflow statuses) should import it from
here instead of hardcoding.  Deployment-tunable values live in the
``PGR`` settings dict instead (see ``pgr.conf``).
"""

# ── Workflow / master-data module identity ──────────────────────────
PGR_MODULE_NAME: str = "RAINMAKER-PGR"
MDMS_SERVICE_DEFS_MASTER: str = "ServiceDefs"

# ── Well-known workflow actions / statuses ──────────────────────────
# Statuses are owned by the workflow engine; these are the only values
# the service itself needs to name.
ACTION_CREATE: str = "CREATE"
ACTION_REOPEN: str = "REOPEN"
STATUS_CLOSED_AFTER_RESOLUTION: str = "CLOSEDAFTERRESOLUTION"

# ── Citizen role granted to identities created on the fly ───────────
CITIZEN_ROLE_CODE: str = "CITIZEN"
CITIZEN_ROLE_NAME: str = "Citizen"

# ── Identity-service wire date formats (strptime syntax) ────────────
DATETIME_FORMAT_D_M_Y_H_M_S: str = "%d-%m-%Y %H:%M:%S"
DOB_FORMAT_Y_M_D: str = "%Y-%m-%d"
DOB_FORMAT_D_M_Y: str = "%d/%m/%Y"

# ── Time ────────────────────────────────────────────────────────────
MILLIS_PER_DAY: int = 86_400_000
