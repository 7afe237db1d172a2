# config.py: static settings; per-deployment values come from the environment (.env)
TOKEN_PATH = "src/token.json"
CLIENT_SECRETS_FILE = "credentials/credentials.json"
SCOPES = [
    "https://www.googleapis.com/auth/gmail.modify",
    "https://www.googleapis.com/auth/spreadsheets"
]
# Subject sent by Syncable for every new donation; matched exactly
DONATION_SUBJECT = "【Syncable】新規の支援を受け付けました。"
SEARCH_QUERY = f'subject:"{DONATION_SUBJECT}" is:unread'
# Page size for Gmail messages.list
MAX_RESULTS = 100
# Seconds to wait for the Slack webhook
WEBHOOK_TIMEOUT = 30
