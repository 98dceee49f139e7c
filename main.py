from circleci_provider import EnvironmentVariableState, configure, resource_factory



def main():
    # Example usage of the provider; token/vcs/org may also come from CIRCLECI_* env vars
    config = {
        "token": "0123456789abcdef0123456789abcdef01234567",
        "vcs_type": "github",
        "organization": "acme",
    }

    with configure(config) as client:
        envvars = resource_factory("circleci_environment_variable", client)
        record = EnvironmentVariableState(project="api", name="DEPLOY_KEY", value="s3cr3t")
        envvars.create(record)

        print(f"Created: {record.state()}")

if __name__ == "__main__":
    main()
