from bucket_deleter.cli import run

if __name__ == "__main__":
    run()
