import reflex as rx
import os

# Load environment variables from the project root .env
from dotenv import load_dotenv
project_root = os.path.dirname(os.path.abspath(__file__))
load_dotenv(os.path.join(project_root, ".env"), override=False)

# Determine the correct api_url for the deployment environment
api_url = None
if os.environ.get("RAILWAY_PUBLIC_DOMAIN"):
    # Railway deployment: use the public domain Railway assigns
    api_url = f"https://{os.environ['RAILWAY_PUBLIC_DOMAIN']}"

config_kwargs = {
    "app_name": "security_surveyor",
    "disable_plugins": ["reflex.plugins.sitemap.SitemapPlugin"],
}
if api_url:
    config_kwargs["api_url"] = api_url

config = rx.Config(**config_kwargs)
