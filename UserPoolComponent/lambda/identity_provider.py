# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: MIT-0

''' Call-through client for the Cognito user pool APIs used by the functions.

The operations talk to the pool in the admin no-SRP mode. The API is documented at
https://docs.aws.amazon.com/cognito-user-identity-pools/latest/APIReference/API_Operations.html
'''

import os
import boto3
from botocore.config import Config
from botocore.exceptions import ClientError

from aws_lambda_powertools import Logger
from aws_lambda_powertools import Tracer
logger = Logger()
tracer = Tracer()

# Cognito configuration
region_name = os.environ.get('REGION_NAME') or os.environ.get('AWS_REGION')
user_pool_id = os.environ.get('COGNITO_USER_POOL_ID')
app_client_id = os.environ.get('COGNITO_APP_CLIENT_ID')
auto_confirm_user = os.environ.get('AUTO_CONFIRM_USER', 'true').lower() == 'true'

config = Config(connect_timeout=2, read_timeout=2)
client = boto3.client('cognito-idp', region_name=region_name, config=config)


def success_result(response):
    response = dict(response)
    response.pop('ResponseMetadata', None)
    return {
        'successful': True,
        'result': response,
        'errorMessage': None,
        'errorType': None
    }

def error_result(error):
    return {
        'successful': False,
        'result': None,
        'errorMessage': error.response['Error'].get('Message', str(error)),
        'errorType': error.response['Error'].get('Code', type(error).__name__)
    }

def call_cognito(operation, **kwargs):
    try:
        return success_result(getattr(client, operation)(**kwargs))
    except ClientError as e:
        logger.error(f"Cognito {operation} failed", error_code=e.response['Error'].get('Code'))
        return error_result(e)


# Signs in a user without SRP, the result holds the AuthenticationResult tokens or a challenge
@tracer.capture_method(capture_response=False)
def sign_in(username, password):
    return call_cognito(
        'admin_initiate_auth',
        UserPoolId=user_pool_id,
        ClientId=app_client_id,
        AuthFlow='ADMIN_USER_PASSWORD_AUTH',
        AuthParameters={
            'USERNAME': username,
            'PASSWORD': password
        }
    )

# Registers the user with the username as email. Auto-confirmed users can sign in right away
@tracer.capture_method
def sign_up(username, password):
    result = call_cognito(
        'sign_up',
        ClientId=app_client_id,
        Username=username,
        Password=password,
        UserAttributes=[
            {'Name': 'email', 'Value': username}
        ]
    )

    if result['successful'] and auto_confirm_user:
        confirmation = admin_confirm_sign_up(username)
        if not confirmation['successful']:
            return confirmation
        verification = confirm_email_address(username)
        if not verification['successful']:
            return verification
        result['result']['UserConfirmed'] = True

    return result

@tracer.capture_method
def admin_confirm_sign_up(username):
    return call_cognito(
        'admin_confirm_sign_up',
        UserPoolId=user_pool_id,
        Username=username
    )

@tracer.capture_method
def confirm_sign_up(username, confirmation_code):
    return call_cognito(
        'confirm_sign_up',
        ClientId=app_client_id,
        Username=username,
        ConfirmationCode=confirmation_code
    )

@tracer.capture_method
def resend_confirmation_code(username):
    return call_cognito(
        'resend_confirmation_code',
        ClientId=app_client_id,
        Username=username
    )

@tracer.capture_method(capture_response=False)
def refresh_tokens(refresh_token):
    return call_cognito(
        'admin_initiate_auth',
        UserPoolId=user_pool_id,
        ClientId=app_client_id,
        AuthFlow='REFRESH_TOKEN_AUTH',
        AuthParameters={
            'REFRESH_TOKEN': refresh_token
        }
    )

# Cognito sends the confirmation code to the verified phone number or email of the user
@tracer.capture_method
def forgot_password(username):
    return call_cognito(
        'forgot_password',
        ClientId=app_client_id,
        Username=username
    )

@tracer.capture_method
def confirm_forgot_password(username, confirmation_code, password):
    return call_cognito(
        'confirm_forgot_password',
        ClientId=app_client_id,
        Username=username,
        ConfirmationCode=confirmation_code,
        Password=password
    )

@tracer.capture_method
def admin_reset_password(username):
    return call_cognito(
        'admin_reset_user_password',
        UserPoolId=user_pool_id,
        Username=username
    )

@tracer.capture_method
def admin_delete_user(username):
    return call_cognito(
        'admin_delete_user',
        UserPoolId=user_pool_id,
        Username=username
    )

@tracer.capture_method
def admin_get_user(username):
    return call_cognito(
        'admin_get_user',
        UserPoolId=user_pool_id,
        Username=username
    )

# Custom attributes need the custom: prefix in their name
@tracer.capture_method
def admin_update_user_attributes(username, user_attributes):
    return call_cognito(
        'admin_update_user_attributes',
        UserPoolId=user_pool_id,
        Username=username,
        UserAttributes=user_attributes
    )

def update_user_attribute(username, attribute_name, attribute_value):
    return admin_update_user_attributes(username, [{'Name': attribute_name, 'Value': attribute_value}])

def confirm_email_address(username):
    return admin_update_user_attributes(username, [{'Name': 'email_verified', 'Value': 'true'}])
