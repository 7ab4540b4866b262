from healthwatch.cli import app

app()
