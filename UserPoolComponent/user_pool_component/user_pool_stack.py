# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: MIT-0

import pathlib
import aws_cdk as cdk

from aws_cdk import (
    aws_cognito as _cognito,
    aws_iam as _iam,
    aws_apigatewayv2 as _api,
    aws_logs as _logs,
    aws_lambda as _lambda
)
from constructs import Construct

LAMBDA_PATH = str(pathlib.Path(__file__).parent.parent.joinpath("lambda").resolve())

# Function name, handler module, route path and the Cognito actions it calls
USER_POOL_FUNCTIONS = [
    ("SignUp", "sign_up", "/sign-up", ["cognito-idp:SignUp", "cognito-idp:AdminConfirmSignUp", "cognito-idp:AdminUpdateUserAttributes"]),
    ("ConfirmSignUp", "confirm_sign_up", "/confirm-sign-up", ["cognito-idp:ConfirmSignUp"]),
    ("ResendConfirmationCode", "resend_confirmation_code", "/resend-confirmation-code", ["cognito-idp:ResendConfirmationCode"]),
    ("SignIn", "sign_in", "/sign-in", ["cognito-idp:AdminInitiateAuth"]),
    ("RefreshTokens", "refresh_tokens", "/refresh-tokens", ["cognito-idp:AdminInitiateAuth"]),
    ("ForgotPassword", "forgot_password", "/forgot-password", ["cognito-idp:ForgotPassword"]),
    ("ConfirmForgotPassword", "confirm_forgot_password", "/confirm-forgot-password", ["cognito-idp:ConfirmForgotPassword"]),
    ("ResetPassword", "reset_password", "/reset-password", ["cognito-idp:AdminResetUserPassword"]),
    ("UpdateUserAttribute", "update_user_attribute", "/update-user-attribute", ["cognito-idp:AdminUpdateUserAttributes"]),
    ("DeleteUser", "delete_user", "/delete-user", ["cognito-idp:AdminDeleteUser"]),
    ("GetUser", "get_user", "/get-user", ["cognito-idp:AdminGetUser"]),
    ("TokenValid", "token_valid", "/token-valid", [])
]

class UserPoolStack(cdk.Stack):

    def __init__(self, scope: Construct, construct_id: str, *, auto_confirm_user: bool = True, bundle_dependencies: bool = True, **kwargs) -> None:
        super().__init__(scope, construct_id, **kwargs)

        # Users sign up and sign in with their email address as the username
        user_pool = _cognito.UserPool(
            self,
            "UserPool",
            self_sign_up_enabled=True,
            sign_in_aliases=_cognito.SignInAliases(email=True),
            auto_verify=_cognito.AutoVerifiedAttrs(email=True),
            account_recovery=_cognito.AccountRecovery.EMAIL_ONLY,
            removal_policy=cdk.RemovalPolicy.DESTROY
        )

        # The functions sign users in with the admin no-SRP flow, refresh token auth is always enabled
        app_client = user_pool.add_client(
            "AppClient",
            auth_flows=_cognito.AuthFlow(admin_user_password=True),
            generate_secret=False
        )

        # Function code with requests and PyJWT installed next to it. Powertools comes from the public layer
        if bundle_dependencies:
            code = _lambda.Code.from_asset(
                path=LAMBDA_PATH,
                bundling=cdk.BundlingOptions(
                    image=_lambda.Runtime.PYTHON_3_12.bundling_image,
                    command=[
                        "bash", "-c", "pip install -r requirements.txt -t /asset-output && cp -au . /asset-output"
                    ]
                )
            )
        else:
            code = _lambda.Code.from_asset(path=LAMBDA_PATH)

        powertools_layer = _lambda.LayerVersion.from_layer_version_arn(
            self,
            "PowertoolsLayer",
            f"arn:aws:lambda:{cdk.Aws.REGION}:017000801446:layer:AWSLambdaPowertoolsPythonV3-python312-x86_64:7"
        )

        # Create the HTTP API the clients call
        api = _api.CfnApi(
            self,
            "UserPoolApi",
            name="UserPoolHttpApi",
            description="Python Serverless HTTP API for the Cognito user pool",
            protocol_type="HTTP",
            cors_configuration=_api.CfnApi.CorsProperty(
                allow_origins=["*"],
                allow_headers=["*"],
                allow_methods=["POST"]
            )
        )

        # Create the CloudWatch Log Group for the HTTP API logs
        endpoint_logs = _logs.LogGroup(
            self,
            "UserPoolApiLogs",
            retention=_logs.RetentionDays.ONE_MONTH,
            removal_policy=cdk.RemovalPolicy.DESTROY
        )

        # Define the API auto deployment stage
        _api.CfnStage(
            self,
            "UserPoolApiStage",
            api_id=api.ref,
            stage_name="prod",
            auto_deploy=True,
            access_log_settings=_api.CfnStage.AccessLogSettingsProperty(
                destination_arn=endpoint_logs.log_group_arn,
                format="$context.requestId $context.requestTime $context.resourcePath $context.httpMethod $context.status $context.protocol"
            )
        )

        environment = {
            "REGION_NAME": cdk.Aws.REGION,
            "COGNITO_USER_POOL_ID": user_pool.user_pool_id,
            "COGNITO_APP_CLIENT_ID": app_client.user_pool_client_id,
            "AUTO_CONFIRM_USER": "true" if auto_confirm_user else "false",
            "POWERTOOLS_SERVICE_NAME": "user_pool",
            "POWERTOOLS_METRICS_NAMESPACE": "UserPoolComponent"
        }

        for name, module, path, actions in USER_POOL_FUNCTIONS:
            function = _lambda.Function(
                self,
                f"{name}Function",
                code=code,
                runtime=_lambda.Runtime.PYTHON_3_12,
                handler=f"{module}.lambda_handler",
                timeout=cdk.Duration.seconds(15),
                tracing=_lambda.Tracing.ACTIVE,
                memory_size=512,
                layers=[powertools_layer],
                log_retention=_logs.RetentionDays.ONE_MONTH,
                environment=environment
            )
            if actions:
                function.add_to_role_policy(
                    _iam.PolicyStatement(
                        actions=actions,
                        effect=_iam.Effect.ALLOW,
                        resources=[user_pool.user_pool_arn]
                    )
                )
            function.add_permission(
                f"Invoke{name}Function",
                principal=_iam.ServicePrincipal("apigateway.amazonaws.com"),
                source_account=cdk.Aws.ACCOUNT_ID,
                source_arn=f"arn:aws:execute-api:{cdk.Aws.REGION}:{cdk.Aws.ACCOUNT_ID}:{api.ref}/prod/*",
                action="lambda:InvokeFunction"
            )

            integration = _api.CfnIntegration(
                self,
                f"{name}Integration",
                api_id=api.ref,
                integration_type="AWS_PROXY",
                integration_uri=function.function_arn,
                integration_method="POST",
                payload_format_version="2.0"
            )
            _api.CfnRoute(
                self,
                f"{name}Route",
                api_id=api.ref,
                route_key=f"POST {path}",
                target=f"integrations/{integration.ref}"
            )

        cdk.CfnOutput(self, "UserPoolId", value=user_pool.user_pool_id)
        cdk.CfnOutput(self, "AppClientId", value=app_client.user_pool_client_id)
        cdk.CfnOutput(self, "UserPoolApiURL", value=f"{api.attr_api_endpoint}/prod")
