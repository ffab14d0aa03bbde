from rest_framework import status
from rest_framework.exceptions import APIException, NotFound


class EvaluationNotFound(NotFound):
    default_detail = "Evaluation not found."
    default_code = "evaluation_not_found"


class KpiNotFound(NotFound):
    default_detail = "KPI not found."
    default_code = "kpi_not_found"


class SubmissionFailed(APIException):
    """Nothing from the batch was saved; the whole submission can be replayed."""
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_detail = "Could not save evaluation scores. Please retry the submission."
    default_code = "submission_failed"
