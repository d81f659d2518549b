#!/usr/bin/env python3
from lambda_pipeline.main import main

if __name__ == "__main__":
    main()
