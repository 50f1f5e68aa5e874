from vault_upload.client.cli import cli

if __name__ == "__main__":
    cli()
