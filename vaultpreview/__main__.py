from vaultpreview.runtime.runner import main

if __name__ == "__main__":
    main()
