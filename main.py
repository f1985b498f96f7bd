"""Entry point launcher - runs goglaunch.cli as a module"""
import runpy

if __name__ == "__main__":
    # Run goglaunch.cli as a module - this allows proper package imports without path hacks
    runpy.run_module("goglaunch.cli", run_name="__main__")
