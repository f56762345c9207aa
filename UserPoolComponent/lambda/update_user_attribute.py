# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: MIT-0

import identity_provider
from api_responses import metrics, get_header, missing_parameters, service_response, username_from_token

from aws_lambda_powertools import Logger
from aws_lambda_powertools import Tracer
logger = Logger()
tracer = Tracer()

''' Updates a single attribute of the user the id token belongs to.
Custom attributes need the custom: prefix in attributeName '''
@metrics.log_metrics
@tracer.capture_lambda_handler
def lambda_handler(event, context):

    id_token = get_header(event, 'idToken')
    attribute_name = get_header(event, 'attributeName')
    attribute_value = get_header(event, 'attributeValue')

    if id_token is None or attribute_name is None or attribute_value is None:
        return missing_parameters('idToken', 'attributeName', 'attributeValue')

    username, error = username_from_token(id_token)
    if error is not None:
        return error

    logger.append_keys(username=username)
    logger.info("Updating user attribute", attribute_name=attribute_name)

    return service_response(identity_provider.update_user_attribute(username, attribute_name, attribute_value))
