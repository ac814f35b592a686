# Point d entree de l application Flask quand on execute le script
import os

from dotenv import load_dotenv

# variables d environnement depuis le fichier .env (smtp, stockage...)
load_dotenv()

from guestsign import create_app  # noqa: E402

app = create_app()

if __name__ == "__main__":
    port = int(os.environ.get("PORT", 5000))
    app.run(host="0.0.0.0", port=port)
