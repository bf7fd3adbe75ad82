"""
AWS Lambda entry point for Cognito restore operations.
"""

from typing import Any, Dict, Mapping, Optional

from cognito_restore.orchestrator import CognitoRestoreOrchestrator
from cognito_restore.models.restore_result import InvocationResponse
from cognito_restore.models.exceptions import CognitoRestoreError
from cognito_restore.services.logging import LoggingService


SUCCESS_MESSAGE = "Cognito user pool restore completed successfully"
FAILURE_MESSAGE = "Cognito user pool restore failed"

# Configured once per execution environment from FORMATTER_TYPE and LOG_LEVEL
logging_service = LoggingService.from_environment()


def execute(event: Any, context: Any = None,
            environ: Optional[Mapping[str, str]] = None,
            clients: Optional[Dict[str, Any]] = None) -> InvocationResponse:
    """
    Run one restore invocation.

    Args:
        event: Invocation payload; anything other than a mapping is
            treated as no payload
        context: Lambda context
        environ: Environment snapshot (defaults to os.environ)
        clients: Optional pre-built AWS clients keyed by service name

    Returns:
        InvocationResponse: Status message, with the error attached on failure
    """
    payload = event if isinstance(event, Mapping) else None
    if event is not None and payload is None:
        logging_service.log_warning("Ignoring non-object event", {'event_type': type(event).__name__})

    request_id = getattr(context, 'aws_request_id', None)
    logging_service.log_info("Starting lambda restore execution", {'request_id': request_id})

    orchestrator = CognitoRestoreOrchestrator(
        event=payload,
        logging_service=logging_service,
        environ=environ,
        clients=clients
    )

    try:
        orchestrator.initialize()
        orchestrator.execute_restore()
    except CognitoRestoreError as e:
        logging_service.log_error(FAILURE_MESSAGE, e, {'request_id': request_id})
        return InvocationResponse(message=FAILURE_MESSAGE, error=e)

    logging_service.log_info(SUCCESS_MESSAGE, {'request_id': request_id})
    return InvocationResponse(message=SUCCESS_MESSAGE)


def lambda_handler(event: Any, context: Any) -> Dict[str, Any]:
    """
    Lambda handler restoring Cognito users from an S3 backup.

    Returns:
        Dict[str, Any]: ``{"answer": <status message>}``

    Raises:
        CognitoRestoreError: If the restore fails, so the invocation is
            recorded as failed
    """
    response = execute(event, context)
    if response.error is not None:
        raise response.error
    return response.to_dict()
