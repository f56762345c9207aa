# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: MIT-0

import identity_provider
from api_responses import metrics, get_header, missing_parameters, service_response, username_from_token

from aws_lambda_powertools import Logger
from aws_lambda_powertools import Tracer
logger = Logger()
tracer = Tracer()

# Resets the password of the user the id token belongs to. Users can only reset their own password
@metrics.log_metrics
@tracer.capture_lambda_handler
def lambda_handler(event, context):

    id_token = get_header(event, 'idToken')
    if id_token is None:
        logger.info("The id token is required")
        return missing_parameters('idToken')

    username, error = username_from_token(id_token)
    if error is not None:
        return error

    logger.append_keys(username=username)
    return service_response(identity_provider.admin_reset_password(username))
