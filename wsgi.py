from braceria import create_app

app = create_app()
