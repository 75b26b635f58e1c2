from chappecli.main import app

app()
