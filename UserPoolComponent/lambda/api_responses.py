# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: MIT-0

import json
import os

from aws_lambda_powertools import Logger
from aws_lambda_powertools import Metrics
from aws_lambda_powertools import single_metric
from aws_lambda_powertools.metrics import MetricUnit
from token_verification import TokenValidationError, get_username, is_token_valid

logger = Logger()
metrics = Metrics()
metrics.set_default_dimensions(function=os.environ['AWS_LAMBDA_FUNCTION_NAME'])

def record_success_metric():
    metrics.add_metric(name="success", unit=MetricUnit.Count, value=1)

def record_failure_metric(reason: str):
    with single_metric(
        name="failure",
        unit=MetricUnit.Count,
        value=1,
        default_dimensions=metrics.default_dimensions
    ) as metric:
        metric.add_dimension(
            name="reason", value=reason)

# Request parameters are passed as headers. REST APIs keep the header case, HTTP APIs lowercase them
def get_header(event, name):
    headers = event.get('headers') if event else None
    if not headers:
        return None
    if name in headers:
        return headers[name]
    for key, value in headers.items():
        if key.lower() == name.lower():
            return value
    return None

def response(status_code, body):
    return {
        'statusCode': status_code,
        'headers': {
            'Content-Type': 'application/json',
            'Access-Control-Allow-Origin': '*',
            'Access-Control-Allow-Credentials': True
        },
        # Cognito responses hold datetimes (AdminGetUser), those go out as strings
        'body': json.dumps(body, default=str),
        'isBase64Encoded': False
    }

def missing_parameters(*names):
    record_failure_metric('Missing parameters')
    if len(names) == 1:
        return response(400, f"{names[0]} is required")
    return response(400, f"{', '.join(names[:-1])} and {names[-1]} are required")

def service_response(result):
    if result['successful']:
        record_success_metric()
        return response(200, result)
    record_failure_metric(result['errorType'] or 'Cognito error')
    return response(400, result)

''' Checks the id token and returns the username it was issued to, or the error response to send back '''
def username_from_token(id_token):
    try:
        if not is_token_valid(id_token):
            record_failure_metric('Invalid token')
            return None, response(401, "Invalid or expired id token")
        return get_username(id_token), None
    except TokenValidationError as e:
        logger.warning(f"Couldn't figure out if the id token is valid: {e}")
        record_failure_metric('Unverifiable token')
        return None, response(400, "Couldn't verify the id token")
