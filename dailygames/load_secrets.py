import os
from dotenv import load_dotenv

load_dotenv()

# Durable cache is used only when both values are present.
kv_url = os.getenv("KV_URL")
kv_token = os.getenv("KV_TOKEN")

openai_api_key = os.getenv("OPENAI_API_KEY")
openai_base_url = os.getenv("OPENAI_BASE_URL")
openai_model_id = os.getenv("OPENAI_MODEL_ID", "gpt-4.1-mini")

log_level = os.getenv("LOG_LEVEL", "INFO").upper()

if __name__ == "__main__":
    print(kv_url, openai_base_url, openai_model_id, log_level)
