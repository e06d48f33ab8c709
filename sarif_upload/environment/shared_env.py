"""Store keys shared between the steps of one job."""

UPLOAD_SENTINEL = "SARIF_UPLOAD_PERFORMED"
ANALYSIS_KEY = "SARIF_UPLOAD_ANALYSIS_KEY"
WORKFLOW_STARTED_AT = "SARIF_UPLOAD_WORKFLOW_STARTED_AT"
