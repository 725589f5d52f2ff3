"""
Example program wiring the stackkit constructs together
"""
from dotenv import load_dotenv
load_dotenv()
# local
from stackkit import (
    Account,
    Region,
    SecurityGroup,
    AdoptedRepository,
    AdoptedRepositoryProps,
    Topic,
    Artifact,
    CidrIPv4,
    AnyIPv4,
    TcpPort,
    IcmpPing,
    PolicyStatement,
    cloudformation_deploy_action,
    set_profile,
    set_session,
)

# set the root account
Account.set_root_account("management_account_name")                     # resources in this account don't assume a role

# set AWS session and profiles
set_profile("management_iam_user")                                      # this should be an account that can assume the deployment role
set_session("management_session_name")                                  # this is a trackable session name


with Account("deployment_account_name", admin_role="OrganizationAccountAccessRole"):
    with Region("us-east-1"):
        # web tier allows all outbound traffic, the database tier allows nothing
        # outbound until a rule says otherwise
        web = SecurityGroup("web", vpc_id="vpc-0123456789abcdef0")
        web.add_ingress_rule(AnyIPv4(), TcpPort(443), "https")
        web.add_ingress_rule(CidrIPv4("10.0.0.0/16"), IcmpPing())

        database = SecurityGroup("database", vpc_id="vpc-0123456789abcdef0", allow_all_outbound=False)
        database.add_ingress_rule(web, TcpPort(5432), "postgres from web")
        database.add_egress_rule(CidrIPv4("10.0.0.0/16"), TcpPort(443), "internal https")
        database.export()

        # alerts
        alerts = Topic("alerts", display_name="Alerts")
        alerts.export()

        # repository pushed by the build tooling
        images = AdoptedRepository("images", AdoptedRepositoryProps(repository_name="web-images"))
        images.add_to_resource_policy(
            PolicyStatement()
            .add_actions("ecr:BatchGetImage", "ecr:GetDownloadUrlForLayer")
            .add_service_principal("codebuild.amazonaws.com")
        )

        # pipeline deploy step for the rendered template
        build_output = Artifact("BuildOutput")
        deploy = cloudformation_deploy_action(
            name="Deploy",
            stack_name="web",
            template_path=build_output.at_path("template.yaml"),
            overrides={
                "ImageBucket": build_output.bucket_name,
                "ImageKey": build_output.object_key,
            },
        )
