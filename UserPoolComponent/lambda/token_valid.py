# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: MIT-0

from api_responses import metrics, get_header, missing_parameters, record_failure_metric, record_success_metric, response
from token_verification import TokenValidationError, is_token_valid

from aws_lambda_powertools import Logger
from aws_lambda_powertools import Tracer
logger = Logger()
tracer = Tracer()

# Answers with true or false, depending on whether the id token verifies against the user pool keys
@metrics.log_metrics
@tracer.capture_lambda_handler
def lambda_handler(event, context):

    id_token = get_header(event, 'idToken')
    if id_token is None:
        return missing_parameters('idToken')

    try:
        valid = is_token_valid(id_token)
    except TokenValidationError as e:
        logger.warning(f"Exception validating the token: {e}")
        record_failure_metric('Unverifiable token')
        return response(400, False)

    if valid:
        record_success_metric()
    else:
        record_failure_metric('Invalid token')
    return response(200, valid)
