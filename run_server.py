"""
Start a local development server for the farm finance API.
"""

import uvicorn

if __name__ == "__main__":
    print("=" * 60)
    print("Starting Farm Finance Backend")
    print("=" * 60)
    print()
    print("API Endpoints:")
    print("   - Health Check:  GET    http://localhost:8000/health")
    print("   - Finance data:  GET    http://localhost:8000/farm-finance")
    print("   - Save:          PUT    http://localhost:8000/farm-finance")
    print("   - Clear:         DELETE http://localhost:8000/farm-finance")
    print("   - API Docs:             http://localhost:8000/docs")
    print()
    print("Authentication:")
    print("   All endpoints (except /health) require:")
    print("   Authorization: Bearer <supabase access token>")
    print()
    print("Test with curl:")
    print('   curl -X PUT "http://localhost:8000/farm-finance" \\')
    print('     -H "Authorization: Bearer $TOKEN" -H "Content-Type: application/json" \\')
    print('     -d \'{"expense_categories": [{"id": "1", "name": "Seeds", "amount": 100, "isRequired": true}]}\'')
    print()
    print("=" * 60)

    uvicorn.run(
        "agri_backend.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level="info"
    )
