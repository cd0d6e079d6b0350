from secure_app.main import run

run()
