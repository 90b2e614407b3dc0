DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.postgresql',
        'NAME': 'chirho',
        'USER': 'chirho',
        'PASSWORD': 'chirho',
        'HOST': 'localhost',
        'PORT': '5432',
    }
}

# CREATE DATABASE chirho;
# CREATE USER chirho WITH PASSWORD 'chirho';
# ALTER USER chirho CREATEDB;
# ALTER DATABASE chirho OWNER TO chirho;
# GRANT ALL PRIVILEGES ON DATABASE chirho TO chirho;

ADMINS = [
    ('test', 'test@test.it')
]
